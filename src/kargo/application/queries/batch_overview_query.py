"""Batch overview query. Split jobs into active/past and aggregate outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kargo.application.services import BatchJobStore
    from kargo.domain.batch import BatchJob


@dataclass
class BatchOverviewResult:
    """Result of the batch overview query."""

    active_jobs: list[BatchJob]
    past_jobs: list[BatchJob]
    total_orders_processed: int
    total_orders_failed: int
    success_rate: float  # 0-100


class BatchOverviewQuery:
    """Query to summarize the jobs currently held by the job store."""

    def __init__(self, job_store: BatchJobStore):
        self._store = job_store

    def execute(self) -> BatchOverviewResult:
        jobs = self._store.list_jobs()

        active = [job for job in jobs if not job.is_terminal]
        past = [job for job in jobs if job.is_terminal]
        processed = sum(job.processed for job in jobs)
        failed = sum(job.failed for job in jobs)

        success_rate = 0.0
        if processed:
            success_rate = round((processed - failed) / processed * 100, 1)

        return BatchOverviewResult(
            active_jobs=active,
            past_jobs=past,
            total_orders_processed=processed,
            total_orders_failed=failed,
            success_rate=success_rate,
        )
