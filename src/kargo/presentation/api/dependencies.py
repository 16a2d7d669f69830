"""FastAPI dependency injection for the Kargo API.

The batch services are built once per application by ``create_app`` and
stored on ``app.state``; these dependencies hand them to the routers.
"""

from typing import Annotated

from fastapi import Depends, Request

from kargo.application.services import (
    BatchClassificationRunner,
    BatchJobStore,
    ClassificationHistoryService,
)


def get_job_store(request: Request) -> BatchJobStore:
    return request.app.state.job_store


def get_batch_runner(request: Request) -> BatchClassificationRunner:
    return request.app.state.batch_runner


def get_classification_history(request: Request) -> ClassificationHistoryService:
    return request.app.state.classification_history


# Type aliases for cleaner router signatures, e.g.:
#   async def list_batches(store: JobStore): ...
JobStore = Annotated[BatchJobStore, Depends(get_job_store)]
BatchRunner = Annotated[BatchClassificationRunner, Depends(get_batch_runner)]
ClassificationHistory = Annotated[
    ClassificationHistoryService,
    Depends(get_classification_history),
]
