"""Dispatch a reference line to the providers and rank what comes back.

Example
-------
```python
from citation_resolver.services.resolution_service import ResolutionDispatcher

dispatcher = ResolutionDispatcher(primary=crossref, secondary=semantic_scholar)
outcome = dispatcher.resolve("Attention is all you need", limit=5)
```
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from citation_resolver.core.identifiers import ReferenceKind, classify_reference, extract_doi
from citation_resolver.core.models import Paper, ResolutionOutcome
from citation_resolver.providers.adapters import ProviderAdapter
from citation_resolver.services.ranking_service import deduplicate, rank, rank_candidates

logger = logging.getLogger(__name__)


class ResolutionDispatcher:
    """Decide which providers to query for a reference and merge their answers.

    DOI references go to the primary provider's DOI lookup; when that has no
    record, the secondary provider's title search is tried with the DOI text
    (disable with ``enable_doi_title_fallback=False``). Title references query
    both providers' searches concurrently and combine the results, secondary
    first. A provider that raises is treated as having returned nothing.
    """

    def __init__(
        self,
        *,
        primary: ProviderAdapter,
        secondary: ProviderAdapter,
        enable_doi_title_fallback: bool = True,
    ) -> None:
        self.primary = primary
        self.secondary = secondary
        self.enable_doi_title_fallback = enable_doi_title_fallback

    def classify(self, reference: str) -> ReferenceKind:
        return classify_reference(reference)

    def gather_candidates(self, reference: str) -> List[Paper]:
        if self.classify(reference) is ReferenceKind.DOI:
            doi = extract_doi(reference) or reference.strip()
            logger.info("Processing DOI: %s", doi)
            paper = self.lookup_doi(doi)
            return [paper] if paper else []

        logger.info('Processing title: "%s"', reference)
        return self._search_both(reference)

    def resolve(self, reference: str, *, limit: int) -> ResolutionOutcome:
        return rank_candidates(self.gather_candidates(reference), reference, limit=limit)

    def lookup_doi(self, doi: str) -> Optional[Paper]:
        paper = self._safe_fetch(self.primary, doi)
        if paper is not None or not self.enable_doi_title_fallback:
            return paper

        logger.info(
            "%s failed for DOI %s, trying %s...", self.primary.name, doi, self.secondary.name
        )
        fallback = self._safe_search(self.secondary, doi)
        return fallback[0] if fallback else None

    def search_title(self, title: str, *, limit: int) -> List[Paper]:
        ranked = rank(deduplicate(self._search_both(title)), title)
        return ranked[:limit]

    def _search_both(self, title: str) -> List[Paper]:
        with ThreadPoolExecutor(max_workers=2) as executor:
            secondary_future = executor.submit(self._safe_search, self.secondary, title)
            primary_future = executor.submit(self._safe_search, self.primary, title)
            secondary_results = secondary_future.result()
            primary_results = primary_future.result()
        return [*secondary_results, *primary_results]

    def _safe_fetch(self, adapter: ProviderAdapter, doi: str) -> Optional[Paper]:
        try:
            return adapter.fetch_by_doi(doi)
        except Exception:
            logger.exception("%s DOI lookup raised for %s", adapter.name, doi)
            return None

    def _safe_search(self, adapter: ProviderAdapter, title: str) -> List[Paper]:
        try:
            return list(adapter.search_by_title(title))
        except Exception:
            logger.exception('%s title search raised for "%s"', adapter.name, title)
            return []
