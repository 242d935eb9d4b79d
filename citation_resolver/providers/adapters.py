"""Provider adapters mapping upstream records onto :class:`Paper`.

Each adapter pairs a provider name with a DOI lookup and a title search
function. Adapters never raise: transport failures, upstream errors and
malformed payloads are logged, reported to the metrics sink and turned into
``None`` or ``[]``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

import requests

from citation_resolver.core.identifiers import normalize_doi, normalize_title
from citation_resolver.core.metrics import ApiCallMetrics
from citation_resolver.core.models import (
    UNKNOWN_TITLE,
    UNKNOWN_VENUE,
    UNKNOWN_YEAR,
    Author,
    Paper,
)
from citation_resolver.providers.clients.base import ClientError, RateLimitedError
from citation_resolver.providers.clients.crossref import CrossrefClient, CrossrefWork
from citation_resolver.providers.clients.semanticscholar import (
    SemanticScholarClient,
    SemanticScholarPaper,
)

logger = logging.getLogger(__name__)

CROSSREF = "crossref"
SEMANTICSCHOLAR = "semanticScholar"

_ADAPTER_FAILURES = (
    ClientError,
    requests.RequestException,
    ValueError,
    TypeError,
    KeyError,
    AttributeError,
    IndexError,
)


def crossref_work_to_paper(work: CrossrefWork, *, fallback_doi: str = "") -> Paper:
    return Paper(
        title=work.title or UNKNOWN_TITLE,
        authors=tuple(Author(family=family, given=given) for family, given in work.authors),
        venue=work.container_title or work.event_name or UNKNOWN_VENUE,
        year=work.year if work.year is not None else UNKNOWN_YEAR,
        doi=normalize_doi(work.doi) or fallback_doi,
        source=CROSSREF,
    )


def split_display_name(name: str) -> Author:
    """Split a full display name: last token is the family name, the rest given."""

    parts = name.split()
    if not parts:
        return Author()
    return Author(family=parts[-1], given=" ".join(parts[:-1]))


def semanticscholar_paper_to_paper(record: SemanticScholarPaper) -> Paper:
    return Paper(
        title=record.title or UNKNOWN_TITLE,
        authors=tuple(split_display_name(name) for name in record.authors),
        venue=record.venue or UNKNOWN_VENUE,
        year=record.year if record.year is not None else UNKNOWN_YEAR,
        doi=normalize_doi(record.doi) or "",
        source=SEMANTICSCHOLAR,
    )


def title_contains_query(paper: Paper, query: str) -> bool:
    return normalize_title(query) in normalize_title(paper.title)


@dataclass
class ProviderAdapter:
    """Uniform ``fetch by id`` / ``search by text`` capability for one provider."""

    name: str
    metrics: ApiCallMetrics
    search: Callable[[str], List[Paper]]
    lookup: Optional[Callable[[str], Optional[Paper]]] = None
    filter_by_title: bool = True

    def fetch_by_doi(self, doi: str) -> Optional[Paper]:
        if self.lookup is None:
            return None

        logger.info("Searching %s for DOI: %s", self.name, doi)
        started_at = time.monotonic()
        try:
            paper = self.lookup(doi)
        except _ADAPTER_FAILURES as exc:
            self.metrics.track(self.name, started_at, False)
            self._log_failure("DOI lookup", exc)
            return None

        self.metrics.track(self.name, started_at, True)
        return paper

    def search_by_title(self, title: str) -> List[Paper]:
        logger.info('Searching %s for title: "%s"', self.name, title)
        started_at = time.monotonic()
        try:
            papers = self.search(title)
            found = len(papers)
            if self.filter_by_title:
                papers = [paper for paper in papers if title_contains_query(paper, title)]
        except _ADAPTER_FAILURES as exc:
            self.metrics.track(self.name, started_at, False)
            self._log_failure("title search", exc)
            return []

        self.metrics.track(self.name, started_at, True)
        logger.info("Found %d items from %s", found, self.name)
        if self.filter_by_title:
            logger.info("Found %d matches", len(papers))
        return papers

    def _log_failure(self, operation: str, exc: Exception) -> None:
        if isinstance(exc, RateLimitedError):
            logger.error(
                "%s rate limit exceeded. Please wait before making more requests.", self.name
            )
            return
        logger.warning("%s %s error: %s", self.name, operation, exc)


def crossref_adapter(
    client: CrossrefClient,
    metrics: ApiCallMetrics,
    *,
    rows: int = 10,
    filter_by_title: bool = True,
) -> ProviderAdapter:
    def lookup(doi: str) -> Optional[Paper]:
        work = client.works_by_doi(doi)
        if work is None:
            return None
        return crossref_work_to_paper(work, fallback_doi=doi)

    def search(title: str) -> List[Paper]:
        return [crossref_work_to_paper(work) for work in client.search_by_title(title, rows=rows)]

    return ProviderAdapter(
        name=CROSSREF,
        metrics=metrics,
        search=search,
        lookup=lookup,
        filter_by_title=filter_by_title,
    )


def semanticscholar_adapter(
    client: SemanticScholarClient,
    metrics: ApiCallMetrics,
    *,
    limit: int = 10,
    filter_by_title: bool = True,
) -> ProviderAdapter:
    def search(title: str) -> List[Paper]:
        return [
            semanticscholar_paper_to_paper(record)
            for record in client.search_papers(title, limit=limit)
        ]

    return ProviderAdapter(
        name=SEMANTICSCHOLAR,
        metrics=metrics,
        search=search,
        filter_by_title=filter_by_title,
    )


__all__ = [
    "CROSSREF",
    "SEMANTICSCHOLAR",
    "ProviderAdapter",
    "crossref_adapter",
    "crossref_work_to_paper",
    "semanticscholar_adapter",
    "semanticscholar_paper_to_paper",
    "split_display_name",
    "title_contains_query",
]
