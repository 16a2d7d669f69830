"""Batch domain - jobs, per-order results and their lifecycle."""

from kargo.domain.batch.entities import BatchItemResult, BatchJob
from kargo.domain.batch.exceptions import (
    BatchJobNotFoundError,
    InvalidJobTransitionError,
)
from kargo.domain.batch.value_objects import JobStatus, ResultStatus

__all__ = [
    "BatchItemResult",
    "BatchJob",
    "BatchJobNotFoundError",
    "InvalidJobTransitionError",
    "JobStatus",
    "ResultStatus",
]
