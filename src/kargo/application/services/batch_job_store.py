"""In-memory registry of batch jobs.

The store is the single owner of job state. Jobs are frozen dataclasses;
updates replace the stored job with a merged copy and publish a fresh
snapshot of the whole list through the subscription bus.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from kargo.application.services.job_subscription_bus import (
    JobSubscriptionBus,
    SnapshotCallback,
    Unsubscribe,
)
from kargo.domain.batch import (
    BatchJob,
    BatchJobNotFoundError,
    InvalidJobTransitionError,
)

logger = logging.getLogger(__name__)


class BatchJobStore:
    """Owns the canonical, most-recent-first list of batch jobs."""

    def __init__(
        self,
        bus: JobSubscriptionBus | None = None,
        max_retained_jobs: int = 100,
    ):
        self._bus = bus or JobSubscriptionBus()
        self._max_retained_jobs = max_retained_jobs
        self._jobs: list[BatchJob] = []

    @property
    def bus(self) -> JobSubscriptionBus:
        return self._bus

    def create_job(self, total_units: int, name: str | None = None) -> BatchJob:
        """Register a new queued job at the head of the list."""
        job = BatchJob.create(total=total_units, name=name)
        self._jobs.insert(0, job)
        self._evict_expired()
        logger.debug(
            "Created batch job %s (%s, %d orders)", job.id, job.name, total_units
        )
        self._publish()
        return job

    def update_job(self, job_id: str, **fields: Any) -> BatchJob | None:
        """Shallow-merge fields onto a job.

        Returns the updated job, or None when the id is unknown (in which
        case nothing is published).

        Raises
        ------
        InvalidJobTransitionError
            If the update would move the status or the processed count
            backwards.
        """
        for index, current in enumerate(self._jobs):
            if current.id == job_id:
                break
        else:
            logger.debug("Ignoring update for unknown batch job %s", job_id)
            return None

        updated = dataclasses.replace(current, **fields)
        self._check_forward_only(current, updated)

        self._jobs[index] = updated
        self._publish()
        return updated

    def list_jobs(self) -> list[BatchJob]:
        """Return a snapshot of all jobs, most recent first."""
        return list(self._jobs)

    def get_job(self, job_id: str) -> BatchJob:
        for job in self._jobs:
            if job.id == job_id:
                return job
        raise BatchJobNotFoundError(job_id)

    def find_job(self, job_id: str) -> BatchJob | None:
        return next((job for job in self._jobs if job.id == job_id), None)

    def subscribe(self, callback: SnapshotCallback) -> Unsubscribe:
        """Subscribe to snapshots, starting with the current one."""
        return self._bus.subscribe(callback, initial_snapshot=self.list_jobs())

    def _publish(self) -> None:
        self._bus.notify(self.list_jobs())

    def _check_forward_only(self, current: BatchJob, updated: BatchJob) -> None:
        if not current.status.can_transition_to(updated.status):
            raise InvalidJobTransitionError(current.id, current.status, updated.status)
        if updated.processed < current.processed:
            raise InvalidJobTransitionError(
                current.id,
                current.status,
                updated.status,
                message=(
                    f"Processed count of job {current.id} cannot decrease "
                    f"({current.processed} -> {updated.processed})"
                ),
            )

    def _evict_expired(self) -> None:
        if not self._max_retained_jobs:
            return

        overflow = len(self._jobs) - self._max_retained_jobs
        if overflow <= 0:
            return

        # Oldest jobs sit at the tail; only finished ones may go
        for job in reversed(list(self._jobs)):
            if overflow == 0:
                break
            if job.is_terminal:
                self._jobs.remove(job)
                overflow -= 1
                logger.debug("Evicted finished batch job %s", job.id)
