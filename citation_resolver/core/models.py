from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

UNKNOWN_TITLE = "Unknown title"
UNKNOWN_AUTHOR = "Unknown author"
UNKNOWN_FAMILY = "Unknown"
UNKNOWN_VENUE = "Unknown journal"
UNKNOWN_YEAR = "Unknown year"

MULTIPLE_MATCHES_MESSAGE = "Multiple matches found - please select one"
NO_RESULTS_MESSAGE = "No results found"


@dataclass(frozen=True)
class Author:
    family: str = ""
    given: str = ""

    @property
    def display_family(self) -> str:
        return self.family or UNKNOWN_FAMILY

    def to_dict(self) -> Dict[str, str]:
        return {"family": self.family, "given": self.given}


@dataclass(frozen=True)
class Paper:
    """Provider-agnostic bibliographic record used throughout the pipeline.

    Missing fields carry sentinel strings rather than ``None`` so that every
    renderer can print them directly. ``source`` names the provider that
    produced the record and is informational only.
    """

    title: str = UNKNOWN_TITLE
    authors: Tuple[Author, ...] = ()
    venue: str = UNKNOWN_VENUE
    year: Union[str, int] = UNKNOWN_YEAR
    doi: str = ""
    source: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "authors": [author.to_dict() for author in self.authors],
            "journal": self.venue,
            "year": self.year,
            "doi": self.doi,
        }


@dataclass(frozen=True)
class Resolved:
    paper: Paper


@dataclass(frozen=True)
class Ambiguous:
    """Two or more ranked candidates that need caller disambiguation."""

    candidates: Tuple[Paper, ...]

    def __post_init__(self) -> None:
        if len(self.candidates) < 2:
            raise ValueError("Ambiguous outcomes require at least two candidates")


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class ResolutionError:
    """A line whose resolution or rendering raised; reported like ``NotFound``."""

    reason: str


ResolutionOutcome = Union[Resolved, Ambiguous, NotFound, ResolutionError]


@dataclass(frozen=True)
class NotFoundEntry:
    index: int
    query: str

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "query": self.query}


@dataclass(frozen=True)
class MatchOption:
    id: int
    paper: Paper
    formatted: str

    def to_dict(self) -> Dict[str, Any]:
        payload = {"id": self.id}
        payload.update(self.paper.to_dict())
        payload["formatted"] = self.formatted
        return payload


@dataclass(frozen=True)
class AmbiguousGroup:
    index: int
    query: str
    options: Tuple[MatchOption, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "query": self.query,
            "options": [option.to_dict() for option in self.options],
        }


@dataclass
class BatchResult:
    """Per-line outcomes of a batch run plus the derived index lists."""

    style: str
    outcomes: List[ResolutionOutcome] = field(default_factory=list)
    rendered: List[str] = field(default_factory=list)
    not_found: List[NotFoundEntry] = field(default_factory=list)
    ambiguous: List[AmbiguousGroup] = field(default_factory=list)
    papers: List[Optional[Paper]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "formatted": list(self.rendered),
            "notFound": [entry.to_dict() for entry in self.not_found],
            "multipleMatches": [group.to_dict() for group in self.ambiguous],
            "papers": [paper.to_dict() if paper else None for paper in self.papers],
            "format": self.style,
        }


@dataclass(frozen=True)
class ExportDocument:
    content: str
    filename: str
    content_type: str = "text/plain"


__all__ = [
    "Ambiguous",
    "AmbiguousGroup",
    "Author",
    "BatchResult",
    "ExportDocument",
    "MatchOption",
    "MULTIPLE_MATCHES_MESSAGE",
    "NO_RESULTS_MESSAGE",
    "NotFound",
    "NotFoundEntry",
    "Paper",
    "Resolved",
    "ResolutionError",
    "ResolutionOutcome",
    "UNKNOWN_AUTHOR",
    "UNKNOWN_FAMILY",
    "UNKNOWN_TITLE",
    "UNKNOWN_VENUE",
    "UNKNOWN_YEAR",
]
