"""Application layer services."""

from kargo.application.services.batch_classification_runner import (
    BatchClassificationRunner,
)
from kargo.application.services.batch_job_store import BatchJobStore
from kargo.application.services.classification_history import (
    ClassificationHistoryEntry,
    ClassificationHistoryService,
)
from kargo.application.services.job_subscription_bus import (
    JobSubscriptionBus,
    LatestSnapshotChannel,
    SnapshotCallback,
    Unsubscribe,
)

__all__ = [
    "BatchClassificationRunner",
    "BatchJobStore",
    "ClassificationHistoryEntry",
    "ClassificationHistoryService",
    "JobSubscriptionBus",
    "LatestSnapshotChannel",
    "SnapshotCallback",
    "Unsubscribe",
]
