"""Batch job entities.

Jobs and results are frozen: the job store replaces a job with an updated
copy instead of mutating it, so snapshots handed to observers never change
under their feet.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4

from kargo.domain.batch.value_objects import JobStatus, ResultStatus
from kargo.domain.shared.time import utc_now


@dataclass(frozen=True)
class BatchItemResult:
    """Outcome of processing one order."""

    order_id: str
    order_number: str
    status: ResultStatus
    message: str
    hs_codes_generated: int = 0

    @property
    def is_failure(self) -> bool:
        return self.status == ResultStatus.FAILED

    def to_dict(self) -> dict:
        return {
            "order_id": self.order_id,
            "order_number": self.order_number,
            "status": self.status.value,
            "message": self.message,
            "hs_codes_generated": self.hs_codes_generated,
        }


@dataclass(frozen=True)
class BatchJob:
    """One batch classification run over a list of orders."""

    id: str
    name: str
    total: int
    processed: int = 0
    failed: int = 0
    status: JobStatus = JobStatus.QUEUED
    created_at: datetime = field(default_factory=utc_now)
    completed_at: datetime | None = None
    results: tuple[BatchItemResult, ...] = ()

    @classmethod
    def create(cls, total: int, name: str | None = None) -> BatchJob:
        return cls(
            id=str(uuid4()),
            name=name or f"Batch #{random.randint(0, 999)}",
            total=total,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal()

    @property
    def succeeded(self) -> int:
        return self.processed - self.failed

    @property
    def progress_percent(self) -> float:
        if self.total == 0:
            return 100.0 if self.is_terminal else 0.0
        return round(self.processed / self.total * 100, 1)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "total": self.total,
            "processed": self.processed,
            "failed": self.failed,
            "status": self.status.value,
            "progress_percent": self.progress_percent,
            "created_at": self.created_at.isoformat(),
            "completed_at": (
                self.completed_at.isoformat() if self.completed_at else None
            ),
            "results": [result.to_dict() for result in self.results],
        }
