"""High-level citation API over DOI and title references.

This module exposes the :class:`CitationClient` facade used by the functional
helpers in :mod:`citation_resolver.__init__` and by the command line.

Example: format a reference list
--------------------------------
```python
from citation_resolver.api import CitationClient

client = CitationClient()
result = client.resolve_batch("10.1038/nature14539\nAttention is all you need", "apa")
for line in result.rendered:
    print(line)
```
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Union

import requests

from .core.identifiers import is_valid_doi, normalize_doi
from .core.metrics import ApiCallMetrics
from .core.models import BatchResult, ExportDocument, Paper
from .core.settings import CitationSettings
from .exceptions import InvalidDoiError, InvalidTitleError
from .formatting.styles import CitationStyle, ExportFormat
from .providers.adapters import (
    CROSSREF,
    SEMANTICSCHOLAR,
    ProviderAdapter,
    crossref_adapter,
    semanticscholar_adapter,
)
from .providers.clients.crossref import CrossrefClient
from .providers.clients.semanticscholar import SemanticScholarClient
from .services.batch_service import BatchService
from .services.resolution_service import ResolutionDispatcher

logger = logging.getLogger(__name__)

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 500


class CitationClient:
    """Facade wiring provider clients, adapters, dispatcher and batch service.

    Inputs are reference lines (DOIs or titles). Adapters, the metrics sink and
    the HTTP session can be injected, which is how tests replace the network.
    """

    def __init__(
        self,
        settings: Optional[CitationSettings] = None,
        *,
        session: Optional[requests.Session] = None,
        metrics: Optional[ApiCallMetrics] = None,
        crossref: Optional[ProviderAdapter] = None,
        semanticscholar: Optional[ProviderAdapter] = None,
    ) -> None:
        self.settings = settings or CitationSettings()
        self.session = self.settings.build_session(session)
        self.metrics = metrics or ApiCallMetrics(providers=(CROSSREF, SEMANTICSCHOLAR))

        self.crossref = crossref or crossref_adapter(
            CrossrefClient(
                session=self.session,
                base_url=self.settings.crossref_base_url,
                timeout=self.settings.timeout,
                max_attempts=self.settings.max_attempts,
            ),
            self.metrics,
            rows=self.settings.search_rows,
        )
        self.semanticscholar = semanticscholar or semanticscholar_adapter(
            SemanticScholarClient(
                api_key=self.settings.semanticscholar_api_key,
                session=self.session,
                base_url=self.settings.semanticscholar_base_url,
                timeout=self.settings.timeout,
                max_attempts=self.settings.max_attempts,
            ),
            self.metrics,
            limit=self.settings.search_rows,
        )

        self.dispatcher = ResolutionDispatcher(
            primary=self.crossref,
            secondary=self.semanticscholar,
            enable_doi_title_fallback=self.settings.enable_doi_title_fallback,
        )
        self._batch_service = BatchService(
            self.dispatcher,
            candidate_limit=self.settings.format_candidate_limit,
            workers=self.settings.batch_workers,
        )

    def resolve_batch(self, text: str, style: Union[str, CitationStyle] = "apa") -> BatchResult:
        """Resolve and format every non-blank line of ``text``."""

        return self._batch_service.resolve_batch(text, style)

    def export_batch(
        self, text: str, output: Union[str, CitationStyle, ExportFormat] = "bibtex"
    ) -> ExportDocument:
        """Resolve every line of ``text`` and render a downloadable document."""

        return self._batch_service.export_batch(text, output)

    def lookup_by_doi(self, doi: str) -> Optional[Paper]:
        """Look up a single DOI; ``None`` when no provider knows it.

        A ``https://doi.org/`` or ``doi:`` prefix is accepted.
        """

        normalized = normalize_doi(doi)
        if not normalized or not is_valid_doi(normalized):
            raise InvalidDoiError(f"Invalid DOI format: {doi!r}")

        logger.info("DOI lookup request: %s", normalized)
        return self.dispatcher.lookup_doi(normalized)

    def search_by_title(self, title: str) -> List[Paper]:
        """Search both providers by title and return ranked, deduplicated papers."""

        cleaned = (title or "").strip()
        if not TITLE_MIN_LENGTH <= len(cleaned) <= TITLE_MAX_LENGTH:
            raise InvalidTitleError(
                f"Title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters"
            )

        logger.info("Title search request: %s", cleaned)
        return self.dispatcher.search_title(cleaned, limit=self.settings.search_candidate_limit)

    def metrics_snapshot(self) -> Dict[str, object]:
        return self.metrics.snapshot()
