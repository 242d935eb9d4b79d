from __future__ import annotations

import re
from enum import Enum

DOI_PATTERN = re.compile(r"10\.\d{4,9}/[-._;()/:A-Z0-9]+", re.IGNORECASE)
STRICT_DOI_PATTERN = re.compile(r"^10\.\d{4,9}/[-._;():A-Z0-9]+$", re.IGNORECASE)

_DOI_PREFIX_PATTERN = re.compile(r"^(https?://)?(dx\.)?doi\.org/", re.IGNORECASE)


class ReferenceKind(str, Enum):
    DOI = "doi"
    TITLE = "title"


def classify_reference(reference: str | None) -> ReferenceKind:
    """Classify a raw reference line as a DOI or a free-text title.

    The DOI pattern is searched anywhere in the text, so a line such as
    ``doi: 10.1038/nature14539`` is treated as a DOI reference.
    """

    if reference and DOI_PATTERN.search(reference):
        return ReferenceKind.DOI
    return ReferenceKind.TITLE


def extract_doi(reference: str | None) -> str | None:
    """Return the first DOI-shaped substring of ``reference``, if any."""

    if not reference:
        return None
    match = DOI_PATTERN.search(reference)
    return match.group(0) if match else None


def is_valid_doi(doi: str | None) -> bool:
    """Return ``True`` when ``doi`` is exactly a DOI with no surrounding text."""

    if not doi:
        return False
    return STRICT_DOI_PATTERN.match(doi.strip()) is not None


def normalize_doi(doi: str | None) -> str | None:
    """Normalize a DOI string into a canonical lowercase form.

    The normalization removes leading DOI prefixes (e.g., ``https://doi.org/`` or
    ``doi:``), trims whitespace, and lowercases the remaining identifier. Empty
    or missing values return ``None``.
    """

    if not doi:
        return None

    cleaned = doi.strip()
    cleaned = _DOI_PREFIX_PATTERN.sub("", cleaned)
    if cleaned.lower().startswith("doi:"):
        cleaned = cleaned.split(":", 1)[1]
    cleaned = cleaned.strip().lower()

    return cleaned or None


def normalize_title(title: object) -> str:
    """Lowercase and trim a title for dedup keys and query comparison."""

    if not title:
        return ""
    return str(title).strip().lower()
