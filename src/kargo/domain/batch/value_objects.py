"""Batch job status enumerations."""

from enum import Enum


class JobStatus(str, Enum):
    """Lifecycle status of a batch job.

    Jobs move forward only: queued -> processing -> completed. FAILED is part
    of the public vocabulary but the runner never sets it; a job whose orders
    all failed still ends as COMPLETED.
    """

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]

    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)

    def can_transition_to(self, target: "JobStatus") -> bool:
        if target == self:
            return True
        if self.is_terminal():
            return False
        return target.rank > self.rank


_STATUS_RANK = {
    JobStatus.QUEUED: 0,
    JobStatus.PROCESSING: 1,
    JobStatus.COMPLETED: 2,
    JobStatus.FAILED: 2,
}


class ResultStatus(str, Enum):
    """Outcome of processing one order within a batch."""

    SUCCESS = "success"
    FAILED = "failed"
