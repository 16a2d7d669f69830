from kargo.presentation.api.routers.batches import router as batches_router
from kargo.presentation.api.routers.history import router as history_router

__all__ = [
    "batches_router",
    "history_router",
]
