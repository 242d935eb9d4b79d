"""Resolve bibliographic references and render them as citations."""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from .api import CitationClient
from .core.models import Author, BatchResult, ExportDocument, Paper
from .formatting.citations import format_bibtex, format_citation, format_endnote
from .formatting.styles import CitationStyle, ExportFormat

_default_client: Optional[CitationClient] = None


def get_default_client() -> CitationClient:
    """Return the default ``CitationClient`` instance, creating it lazily."""

    global _default_client
    if _default_client is None:
        _default_client = CitationClient()
    return _default_client


def resolve_batch(text: str, style: Union[str, CitationStyle] = "apa") -> BatchResult:
    """Resolve each line of ``text`` and format the matches in ``style``."""

    return get_default_client().resolve_batch(text, style)


def export_batch(text: str, output: Union[str, CitationStyle, ExportFormat] = "bibtex") -> ExportDocument:
    """Resolve each line of ``text`` and render a BibTeX, EndNote or text document."""

    return get_default_client().export_batch(text, output)


def lookup_by_doi(doi: str) -> Optional[Paper]:
    """Look up a paper by DOI, falling back to Semantic Scholar."""

    return get_default_client().lookup_by_doi(doi)


def search_by_title(title: str) -> List[Paper]:
    """Search Crossref and Semantic Scholar by title."""

    return get_default_client().search_by_title(title)


def metrics() -> Dict[str, object]:
    """Snapshot of upstream call counters for the default client."""

    return get_default_client().metrics_snapshot()


__all__ = [
    "Author",
    "BatchResult",
    "CitationClient",
    "CitationStyle",
    "ExportDocument",
    "ExportFormat",
    "Paper",
    "export_batch",
    "format_bibtex",
    "format_citation",
    "format_endnote",
    "get_default_client",
    "lookup_by_doi",
    "metrics",
    "resolve_batch",
    "search_by_title",
]
