"""Citation styles and export formats."""

from .citations import (
    CONFERENCE_KEYWORDS,
    format_authors,
    format_bibtex,
    format_citation,
    format_endnote,
    format_venue,
    render_entry,
)
from .styles import STYLE_RULES, CitationStyle, ExportFormat, StyleRules, resolve_output, resolve_style

__all__ = [
    "CONFERENCE_KEYWORDS",
    "STYLE_RULES",
    "CitationStyle",
    "ExportFormat",
    "StyleRules",
    "format_authors",
    "format_bibtex",
    "format_citation",
    "format_endnote",
    "format_venue",
    "render_entry",
    "resolve_output",
    "resolve_style",
]
