"""Pydantic schemas for API request/response models."""

from kargo.presentation.api.schemas.batches import (
    BatchItemResultResponse,
    BatchJobListResponse,
    BatchJobResponse,
    BatchOverviewResponse,
    BatchSubmitRequest,
    BatchSubmitResponse,
    ClassificationHistoryEntryResponse,
    ClassificationHistoryResponse,
    OrderItemRequest,
    OrderRequest,
)

__all__ = [
    "BatchItemResultResponse",
    "BatchJobListResponse",
    "BatchJobResponse",
    "BatchOverviewResponse",
    "BatchSubmitRequest",
    "BatchSubmitResponse",
    "ClassificationHistoryEntryResponse",
    "ClassificationHistoryResponse",
    "OrderItemRequest",
    "OrderRequest",
]
