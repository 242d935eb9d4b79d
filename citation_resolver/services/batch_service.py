"""Apply resolution and formatting to every line of a reference list."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Union

from citation_resolver.core.models import (
    MULTIPLE_MATCHES_MESSAGE,
    NO_RESULTS_MESSAGE,
    Ambiguous,
    AmbiguousGroup,
    BatchResult,
    ExportDocument,
    MatchOption,
    NotFoundEntry,
    Paper,
    Resolved,
    ResolutionError,
    ResolutionOutcome,
)
from citation_resolver.exceptions import EmptyReferenceListError
from citation_resolver.formatting.citations import format_citation, render_entry
from citation_resolver.formatting.styles import CitationStyle, ExportFormat, resolve_output, resolve_style
from citation_resolver.services.resolution_service import ResolutionDispatcher

logger = logging.getLogger(__name__)

EXPORT_FILES = {
    ExportFormat.BIBTEX: ("references.bib", "application/x-bibtex"),
    ExportFormat.ENDNOTE: ("references.enw", "application/x-endnote-refer"),
}


def split_references(text: Optional[str]) -> List[str]:
    """Split a reference block into trimmed, non-empty lines."""

    if not text:
        return []
    return [line.strip() for line in text.split("\n") if line.strip()]


class BatchService:
    """Resolve a multi-line reference list one line at a time.

    A failure while resolving or rendering one line only degrades that line
    to :class:`ResolutionError`, which is reported like a miss. With
    ``workers > 1`` lines are resolved concurrently; results are always
    reported in input order.
    """

    def __init__(
        self,
        dispatcher: ResolutionDispatcher,
        *,
        candidate_limit: int = 5,
        workers: int = 1,
    ) -> None:
        self.dispatcher = dispatcher
        self.candidate_limit = candidate_limit
        self.workers = max(1, workers)

    def resolve_lines(self, lines: List[str]) -> List[ResolutionOutcome]:
        if self.workers == 1 or len(lines) <= 1:
            return [self._resolve_line(line) for line in lines]

        with ThreadPoolExecutor(max_workers=min(self.workers, len(lines))) as executor:
            return list(executor.map(self._resolve_line, lines))

    def resolve_batch(self, text: str, style: Union[str, CitationStyle] = "apa") -> BatchResult:
        citation_style = resolve_style(style)
        lines = self._require_lines(text)
        outcomes = self.resolve_lines(lines)

        result = BatchResult(style=citation_style.value)
        for index, (query, outcome) in enumerate(zip(lines, outcomes)):
            try:
                self._add_line(result, index, query, outcome, citation_style)
            except Exception as exc:
                logger.exception('Error formatting reference "%s"', query)
                failure = ResolutionError(reason=str(exc))
                self._add_line(result, index, query, failure, citation_style)
        return result

    def export_batch(
        self, text: str, output: Union[str, CitationStyle, ExportFormat] = "bibtex"
    ) -> ExportDocument:
        target = resolve_output(output)
        lines = self._require_lines(text)
        papers = [self._export_paper(outcome) for outcome in self.resolve_lines(lines)]
        content = "\n\n".join(
            self._render_export(query, paper, index, target)
            for index, (query, paper) in enumerate(zip(lines, papers))
        )

        if isinstance(target, ExportFormat):
            filename, content_type = EXPORT_FILES[target]
        else:
            filename, content_type = f"references_{target.value}.txt", "text/plain"
        return ExportDocument(content=content, filename=filename, content_type=content_type)

    def _require_lines(self, text: str) -> List[str]:
        lines = split_references(text)
        if not lines:
            raise EmptyReferenceListError("No valid references provided")
        return lines

    def _resolve_line(self, line: str) -> ResolutionOutcome:
        try:
            return self.dispatcher.resolve(line, limit=self.candidate_limit)
        except Exception as exc:
            logger.exception('Error processing reference "%s"', line)
            return ResolutionError(reason=str(exc))

    @staticmethod
    def _add_line(
        result: BatchResult,
        index: int,
        query: str,
        outcome: ResolutionOutcome,
        style: CitationStyle,
    ) -> None:
        # Everything that can raise runs before the first append.
        if isinstance(outcome, Resolved):
            formatted = format_citation(outcome.paper, style)
            result.rendered.append(formatted)
            result.papers.append(outcome.paper)
        elif isinstance(outcome, Ambiguous):
            options = tuple(
                MatchOption(id=option_id, paper=paper, formatted=format_citation(paper, style))
                for option_id, paper in enumerate(outcome.candidates)
            )
            logger.info('Multiple matches found for "%s", adding to selection list', query)
            result.ambiguous.append(AmbiguousGroup(index=index, query=query, options=options))
            result.rendered.append(MULTIPLE_MATCHES_MESSAGE)
            result.papers.append(None)
        else:
            result.not_found.append(NotFoundEntry(index=index, query=query))
            result.rendered.append(NO_RESULTS_MESSAGE)
            result.papers.append(None)
        result.outcomes.append(outcome)

    @staticmethod
    def _render_export(
        query: str,
        paper: Optional[Paper],
        index: int,
        target: Union[CitationStyle, ExportFormat],
    ) -> str:
        try:
            return render_entry(paper, index, target)
        except Exception:
            logger.exception('Error exporting reference "%s"', query)
            return render_entry(None, index, target)

    @staticmethod
    def _export_paper(outcome: ResolutionOutcome) -> Optional[Paper]:
        if isinstance(outcome, Resolved):
            return outcome.paper
        if isinstance(outcome, Ambiguous):
            return outcome.candidates[0]
        return None
