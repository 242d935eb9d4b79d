"""Semantic Scholar client for free-text paper search."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from citation_resolver.providers.clients.base import BaseHttpClient

DEFAULT_FIELDS = "title,authors,venue,year,externalIds"


@dataclass
class SemanticScholarPaper:
    """Raw fields of a Semantic Scholar search hit."""

    title: Optional[str]
    venue: Optional[str]
    year: Optional[int]
    doi: Optional[str]
    authors: List[str] = field(default_factory=list)


class SemanticScholarClient(BaseHttpClient):
    """Lightweight wrapper around the Semantic Scholar Graph API v1."""

    BASE_URL = "https://api.semanticscholar.org/graph/v1"

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        max_attempts: int = 1,
    ) -> None:
        super().__init__(
            session=session,
            base_url=base_url,
            timeout=timeout,
            max_attempts=max_attempts,
        )
        self.api_key = api_key

    def _auth_headers(self) -> Optional[Dict[str, str]]:
        if not self.api_key:
            return None
        return {"x-api-key": self.api_key}

    def search_papers(
        self,
        query: str,
        *,
        limit: int = 10,
        fields: str = DEFAULT_FIELDS,
    ) -> List[SemanticScholarPaper]:
        if not query:
            return []

        params: Dict[str, Any] = {
            "query": query,
            "limit": limit,
            "fields": fields,
        }
        response = self._request(
            "GET", "/paper/search", params=params, headers=self._auth_headers()
        )
        payload = self._json(response)
        return [
            self._normalize_paper(item)
            for item in payload.get("data") or []
            if isinstance(item, dict)
        ]

    def _normalize_paper(self, data: Dict[str, Any]) -> SemanticScholarPaper:
        external_ids = data.get("externalIds") or {}
        doi = data.get("doi") or (external_ids.get("DOI") if isinstance(external_ids, dict) else None)

        authors: List[str] = []
        for author in data.get("authors") or []:
            if not isinstance(author, dict):
                continue
            name = author.get("name")
            if name:
                authors.append(str(name))

        title = data.get("title")
        venue = data.get("venue")
        year = data.get("year")
        return SemanticScholarPaper(
            title=title if isinstance(title, str) else None,
            venue=venue if isinstance(venue, str) and venue else None,
            year=year if isinstance(year, int) else None,
            doi=doi if isinstance(doi, str) else None,
            authors=authors,
        )
