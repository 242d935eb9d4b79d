"""HTTP clients for the upstream metadata providers."""

from .base import (
    BaseHttpClient,
    ClientError,
    NotFoundError,
    RateLimitedError,
    RequestRejectedError,
    UpstreamError,
)
from .crossref import CrossrefClient, CrossrefWork
from .semanticscholar import DEFAULT_FIELDS as SEMANTICSCHOLAR_DEFAULT_FIELDS
from .semanticscholar import SemanticScholarClient, SemanticScholarPaper

__all__ = [
    "BaseHttpClient",
    "ClientError",
    "CrossrefClient",
    "CrossrefWork",
    "NotFoundError",
    "RateLimitedError",
    "RequestRejectedError",
    "SEMANTICSCHOLAR_DEFAULT_FIELDS",
    "SemanticScholarClient",
    "SemanticScholarPaper",
    "UpstreamError",
]
