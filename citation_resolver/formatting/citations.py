"""Render papers as citation text or as BibTeX / EndNote records."""

from __future__ import annotations

import re
from typing import Optional, Sequence, Union

from citation_resolver.core.models import (
    NO_RESULTS_MESSAGE,
    UNKNOWN_AUTHOR,
    UNKNOWN_TITLE,
    UNKNOWN_VENUE,
    UNKNOWN_YEAR,
    Author,
    Paper,
)
from citation_resolver.formatting.styles import (
    EXPORT_AUTHOR_ENTRY,
    STYLE_RULES,
    CitationStyle,
    ExportFormat,
    resolve_output,
    resolve_style,
)

CONFERENCE_KEYWORDS = (
    "proceedings",
    "conference",
    "cvpr",
    "iccv",
    "eccv",
    "nips",
    "icml",
    "aaai",
    "ijcai",
    "acl",
    "emnlp",
)

PROCEEDINGS_PREFIX = "Proceedings of the "

_LEADING_PROCEEDINGS = re.compile(r"^proceedings\s+of\s+(the\s+)?", re.IGNORECASE)
_STRAY_PUNCTUATION = " \t,;:-."


def display_year(year: Union[str, int, None]) -> Union[str, int]:
    """Year as rendered; empty, missing and zero years show the sentinel."""

    if year is None or str(year).strip() in ("", "0"):
        return UNKNOWN_YEAR
    return year


def format_authors(authors: Optional[Sequence[Author]], style: Union[str, CitationStyle] = "apa") -> str:
    if not authors:
        return UNKNOWN_AUTHOR

    rules = STYLE_RULES[resolve_style(style)]
    entries = [rules.author_entry(author) for author in authors]
    if len(entries) == 1:
        return entries[0]
    return rules.join(entries)


def is_conference_venue(venue: str) -> bool:
    lowered = venue.lower()
    return any(keyword in lowered for keyword in CONFERENCE_KEYWORDS)


def format_venue(venue: Optional[str], year: Union[str, int, None] = None) -> str:
    """Normalize conference venues to ``Proceedings of the <name>``.

    The paper's year is removed from the venue name when present, along with
    punctuation left dangling by the removal. Journal venues pass through.
    """

    if not venue:
        return UNKNOWN_VENUE
    if not is_conference_venue(venue):
        return venue

    cleaned = venue
    year_token = str(year).strip() if year is not None else ""
    if year_token:
        cleaned = re.sub(rf"(?<!\d){re.escape(year_token)}(?!\d)", "", cleaned, count=1)
        cleaned = re.sub(r"\s+,", ",", cleaned)
        cleaned = re.sub(r",\s*,", ",", cleaned)
        cleaned = " ".join(cleaned.split()).strip(_STRAY_PUNCTUATION)

    cleaned = _LEADING_PROCEEDINGS.sub("", cleaned).strip(_STRAY_PUNCTUATION)
    return f"{PROCEEDINGS_PREFIX}{cleaned}"


def format_citation(paper: Optional[Paper], style: Union[str, CitationStyle] = "apa") -> str:
    if paper is None:
        return NO_RESULTS_MESSAGE

    citation_style = resolve_style(style)
    title = paper.title or UNKNOWN_TITLE
    year = display_year(paper.year)
    authors = format_authors(paper.authors, citation_style)
    venue = format_venue(paper.venue or UNKNOWN_VENUE, year)
    return STYLE_RULES[citation_style].template(authors, title, venue, str(year))


def _export_authors(paper: Paper, fmt: ExportFormat, separator: str) -> str:
    if not paper.authors:
        return UNKNOWN_AUTHOR
    entry = EXPORT_AUTHOR_ENTRY[fmt]
    return separator.join(entry(author) for author in paper.authors)


def format_bibtex(paper: Optional[Paper], index: int) -> str:
    """Render a BibTeX ``@article`` keyed ``ref<index + 1>``."""

    if paper is None:
        return ""

    authors = _export_authors(paper, ExportFormat.BIBTEX, " and ")
    return (
        f"@article{{ref{index + 1},\n"
        f"  title={{{paper.title or UNKNOWN_TITLE}}},\n"
        f"  author={{{authors}}},\n"
        f"  journal={{{paper.venue or UNKNOWN_VENUE}}},\n"
        f"  year={{{display_year(paper.year)}}},\n"
        f"  doi={{{paper.doi or ''}}}\n"
        f"}}"
    )


def format_endnote(paper: Optional[Paper]) -> str:
    if paper is None:
        return ""

    doi = paper.doi or ""
    authors = _export_authors(paper, ExportFormat.ENDNOTE, "\r\n")
    return "\n".join(
        [
            "%0 Journal Article",
            f"%T {paper.title or UNKNOWN_TITLE}",
            f"%A {authors}",
            f"%J {paper.venue or UNKNOWN_VENUE}",
            f"%D {display_year(paper.year)}",
            f"%R {doi}",
            f"%U https://doi.org/{doi}",
        ]
    )


def render_entry(
    paper: Optional[Paper], index: int, output: Union[str, CitationStyle, ExportFormat]
) -> str:
    """Render one paper for a citation style or an export format."""

    target = resolve_output(output)
    if target is ExportFormat.BIBTEX:
        return format_bibtex(paper, index)
    if target is ExportFormat.ENDNOTE:
        return format_endnote(paper)
    return format_citation(paper, target)
