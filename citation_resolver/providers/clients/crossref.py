"""Crossref client for DOI lookup and bibliographic title search."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from citation_resolver.providers.clients.base import BaseHttpClient, NotFoundError

SEARCH_SELECT_FIELDS = "DOI,title,author,container-title,published,event"


@dataclass
class CrossrefWork:
    doi: Optional[str]
    title: Optional[str]
    year: Optional[int]
    container_title: Optional[str]
    event_name: Optional[str]
    authors: List[Tuple[str, str]] = field(default_factory=list)


class CrossrefClient(BaseHttpClient):
    """Lightweight wrapper around the Crossref works API."""

    BASE_URL = "https://api.crossref.org"

    def works_by_doi(self, doi: str) -> Optional[CrossrefWork]:
        if not doi:
            return None

        try:
            response = self._request("GET", f"/works/{doi}")
        except NotFoundError:
            return None

        payload = self._json(response).get("message")
        return self._normalize_work(payload)

    def search_by_title(self, title: str, *, rows: int = 10) -> List[CrossrefWork]:
        if not title:
            return []

        params: Dict[str, Any] = {
            "query": title,
            "rows": rows,
            "select": SEARCH_SELECT_FIELDS,
        }
        response = self._request("GET", "/works", params=params)
        message = self._json(response).get("message")
        if not isinstance(message, dict):
            return []
        items = message.get("items") or []

        works: List[CrossrefWork] = []
        for item in items:
            work = self._normalize_work(item)
            if work:
                works.append(work)
        return works

    def _normalize_work(self, data: Any) -> Optional[CrossrefWork]:
        if not isinstance(data, dict):
            return None

        title_parts = data.get("title") or []
        title = title_parts[0] if isinstance(title_parts, list) and title_parts else None
        doi = data.get("DOI")

        return CrossrefWork(
            doi=doi if isinstance(doi, str) else None,
            title=title if isinstance(title, str) else None,
            year=self._extract_year(data),
            container_title=self._extract_container_title(data),
            event_name=self._extract_event_name(data),
            authors=self._extract_authors(data.get("author") or []),
        )

    def _extract_year(self, data: Dict[str, Any]) -> Optional[int]:
        for key in ("published", "issued"):
            component = data.get(key, {})
            if not isinstance(component, dict):
                continue
            parts = component.get("date-parts")
            if isinstance(parts, list) and parts and isinstance(parts[0], list) and parts[0]:
                year = parts[0][0]
                if isinstance(year, int):
                    return year
        return None

    def _extract_authors(self, authors: Any) -> List[Tuple[str, str]]:
        extracted: List[Tuple[str, str]] = []
        if not isinstance(authors, list):
            return extracted
        for author in authors:
            if not isinstance(author, dict):
                continue
            family = author.get("family") or author.get("lastName") or ""
            given = author.get("given") or author.get("firstName") or ""
            extracted.append((str(family), str(given)))
        return extracted

    def _extract_container_title(self, data: Dict[str, Any]) -> Optional[str]:
        container_title = data.get("container-title")
        if isinstance(container_title, list) and container_title:
            first = container_title[0]
            return first if isinstance(first, str) and first else None
        if isinstance(container_title, str) and container_title:
            return container_title
        return None

    def _extract_event_name(self, data: Dict[str, Any]) -> Optional[str]:
        event = data.get("event")
        if isinstance(event, list) and event:
            event = event[0]
        if isinstance(event, dict):
            name = event.get("name")
            if isinstance(name, str) and name:
                return name
        return None
