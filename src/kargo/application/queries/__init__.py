"""Application queries (read-only use cases)."""

from kargo.application.queries.batch_overview_query import (
    BatchOverviewQuery,
    BatchOverviewResult,
)

__all__ = [
    "BatchOverviewQuery",
    "BatchOverviewResult",
]
