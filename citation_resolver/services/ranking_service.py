"""Deduplication and relevance ranking of candidate papers."""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Set, Tuple, Union

from citation_resolver.core.identifiers import normalize_title
from citation_resolver.core.models import (
    Ambiguous,
    NotFound,
    Paper,
    Resolved,
    ResolutionOutcome,
)


def deduplicate(candidates: Iterable[Paper]) -> List[Paper]:
    """Keep the first paper for each normalized title, in encounter order."""

    unique: List[Paper] = []
    seen: Set[str] = set()
    for paper in candidates:
        key = normalize_title(paper.title)
        if key in seen:
            continue
        seen.add(key)
        unique.append(paper)
    return unique


def numeric_year(year: Union[str, int, None]) -> int:
    """Leading integer of ``year``; missing or non-numeric years count as 0."""

    if isinstance(year, int):
        return year
    if not year:
        return 0
    digits = ""
    for char in str(year).strip():
        if not char.isdigit():
            break
        digits += char
    return int(digits) if digits else 0


def relevance_key(paper: Paper, normalized_query: str) -> Tuple[int, float, int]:
    title = normalize_title(paper.title)
    exact = title == normalized_query
    position = title.find(normalized_query)
    return (
        0 if exact else 1,
        position if position >= 0 else math.inf,
        -numeric_year(paper.year),
    )


def rank(candidates: Sequence[Paper], query: str) -> List[Paper]:
    """Order candidates by relevance to ``query``.

    Exact title matches come first, then earlier substring positions of the
    query within the title, then newer years. Papers whose title does not
    contain the query sort after those that do. The sort is stable.
    """

    normalized_query = normalize_title(query)
    return sorted(candidates, key=lambda paper: relevance_key(paper, normalized_query))


def collapse(ranked: Sequence[Paper], limit: int) -> ResolutionOutcome:
    limited = tuple(ranked[:limit])
    if not limited:
        return NotFound()
    if len(limited) == 1:
        return Resolved(limited[0])
    return Ambiguous(limited)


def rank_candidates(candidates: Iterable[Paper], query: str, *, limit: int) -> ResolutionOutcome:
    return collapse(rank(deduplicate(candidates), query), limit)
