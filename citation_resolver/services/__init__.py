"""Service layer for the citation resolver."""

from .batch_service import BatchService, split_references
from .ranking_service import collapse, deduplicate, rank, rank_candidates
from .resolution_service import ResolutionDispatcher

__all__ = [
    "BatchService",
    "ResolutionDispatcher",
    "collapse",
    "deduplicate",
    "rank",
    "rank_candidates",
    "split_references",
]
