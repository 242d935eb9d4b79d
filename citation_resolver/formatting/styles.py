"""Style rule table: author entry format, author list join and citation template."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Sequence, Union

from citation_resolver.core.models import Author
from citation_resolver.exceptions import UnsupportedStyleError


class CitationStyle(str, Enum):
    APA = "apa"
    MLA = "mla"
    CHICAGO = "chicago"
    HARVARD = "harvard"
    VANCOUVER = "vancouver"
    IEEE = "ieee"
    AMA = "ama"
    ASA = "asa"


class ExportFormat(str, Enum):
    BIBTEX = "bibtex"
    ENDNOTE = "endnote"


AuthorEntry = Callable[[Author], str]
AuthorJoin = Callable[[Sequence[str]], str]
Template = Callable[[str, str, str, str], str]


def family_comma_given(author: Author) -> str:
    if author.given:
        return f"{author.display_family}, {author.given}"
    return author.display_family


def given_family(author: Author) -> str:
    if author.given:
        return f"{author.given} {author.display_family}"
    return author.display_family


def family_initial(author: Author) -> str:
    if author.given:
        return f"{author.display_family} {author.given[0]}"
    return author.display_family


def family_comma_initial(author: Author) -> str:
    if author.given:
        return f"{author.display_family}, {author.given[0]}."
    return author.display_family


def oxford_and(entries: Sequence[str]) -> str:
    return ", ".join(entries[:-1]) + ", and " + entries[-1]


def comma_join(entries: Sequence[str]) -> str:
    return ", ".join(entries)


def ampersand_join(entries: Sequence[str]) -> str:
    return ", ".join(entries[:-1]) + " & " + entries[-1]


@dataclass(frozen=True)
class StyleRules:
    author_entry: AuthorEntry
    join: AuthorJoin
    template: Template


STYLE_RULES: Dict[CitationStyle, StyleRules] = {
    CitationStyle.APA: StyleRules(
        family_comma_initial, ampersand_join, lambda a, t, v, y: f"{a} ({y}). {t}. {v}."
    ),
    CitationStyle.MLA: StyleRules(
        family_comma_given, oxford_and, lambda a, t, v, y: f'{a}. "{t}." {v}, {y}.'
    ),
    CitationStyle.CHICAGO: StyleRules(
        family_comma_initial, ampersand_join, lambda a, t, v, y: f'{a}. "{t}." {v} {y}.'
    ),
    CitationStyle.HARVARD: StyleRules(
        family_comma_initial, ampersand_join, lambda a, t, v, y: f"{a} ({y}) '{t}', {v}."
    ),
    CitationStyle.VANCOUVER: StyleRules(
        family_initial, comma_join, lambda a, t, v, y: f"{a}. {t}. {v}. {y}."
    ),
    CitationStyle.IEEE: StyleRules(
        family_comma_initial, ampersand_join, lambda a, t, v, y: f'{a}, "{t}," {v}, {y}.'
    ),
    CitationStyle.AMA: StyleRules(
        family_comma_initial, ampersand_join, lambda a, t, v, y: f"{a}. {t}. {v}. {y}."
    ),
    CitationStyle.ASA: StyleRules(
        family_comma_initial, ampersand_join, lambda a, t, v, y: f'{a}. {y}. "{t}." {v}.'
    ),
}

# Export formats only need an author entry rule; the list join is fixed by the renderer.
EXPORT_AUTHOR_ENTRY: Dict[ExportFormat, AuthorEntry] = {
    ExportFormat.BIBTEX: family_comma_given,
    ExportFormat.ENDNOTE: given_family,
}


def resolve_style(style: Union[str, CitationStyle]) -> CitationStyle:
    if isinstance(style, CitationStyle):
        return style
    try:
        return CitationStyle(str(style).strip().lower())
    except ValueError:
        raise UnsupportedStyleError(str(style)) from None


def resolve_output(style: Union[str, CitationStyle, ExportFormat]) -> Union[CitationStyle, ExportFormat]:
    """Resolve a name that may be either a citation style or an export format."""

    if isinstance(style, (CitationStyle, ExportFormat)):
        return style
    name = str(style).strip().lower()
    try:
        return ExportFormat(name)
    except ValueError:
        return resolve_style(name)
