"""Batch domain exceptions."""

from kargo.domain.batch.value_objects import JobStatus
from kargo.domain.shared.exceptions import (
    BusinessRuleViolation,
    EntityNotFoundError,
    ErrorCode,
)


class BatchJobNotFoundError(EntityNotFoundError):
    """Raised when a batch job id is unknown to the job store."""

    default_code = ErrorCode.JOB_NOT_FOUND

    def __init__(self, job_id: str) -> None:
        super().__init__(
            f"Batch job not found: {job_id}",
            details={"job_id": job_id},
        )
        self.job_id = job_id


class InvalidJobTransitionError(BusinessRuleViolation):
    """Raised when an update would move a job backwards."""

    default_code = ErrorCode.INVALID_STATUS_TRANSITION

    def __init__(
        self,
        job_id: str,
        current: JobStatus,
        target: JobStatus,
        message: str | None = None,
    ) -> None:
        super().__init__(
            message
            or f"Cannot move job {job_id} from {current.value} to {target.value}",
            details={
                "job_id": job_id,
                "current": current.value,
                "target": target.value,
            },
        )
