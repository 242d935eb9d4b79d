"""Core data models, identifiers, metrics and configuration."""

from .identifiers import (
    ReferenceKind,
    classify_reference,
    extract_doi,
    is_valid_doi,
    normalize_doi,
    normalize_title,
)
from .metrics import ApiCallMetrics, ApiCallStats
from .models import (
    Ambiguous,
    Author,
    BatchResult,
    ExportDocument,
    NotFound,
    Paper,
    Resolved,
    ResolutionError,
    ResolutionOutcome,
)
from .settings import CitationSettings

__all__ = [
    "Ambiguous",
    "ApiCallMetrics",
    "ApiCallStats",
    "Author",
    "BatchResult",
    "CitationSettings",
    "ExportDocument",
    "NotFound",
    "Paper",
    "ReferenceKind",
    "Resolved",
    "ResolutionError",
    "ResolutionOutcome",
    "classify_reference",
    "extract_doi",
    "is_valid_doi",
    "normalize_doi",
    "normalize_title",
]
