"""History router for classifications assigned by batch jobs."""

from fastapi import APIRouter, Query

from kargo.presentation.api.dependencies import ClassificationHistory
from kargo.presentation.api.schemas.batches import (
    ClassificationHistoryEntryResponse,
    ClassificationHistoryResponse,
)

router = APIRouter()


@router.get(
    "",
    summary="Search classification history",
)
async def search_history(
    history: ClassificationHistory,
    q: str = Query("", description="Product name (case-insensitive) or HS code"),
    min_confidence: float = Query(0, ge=0, le=100),
) -> ClassificationHistoryResponse:
    """List HS codes assigned by batch jobs, newest first."""
    entries = history.search(term=q, min_confidence=min_confidence)
    return ClassificationHistoryResponse(
        entries=[
            ClassificationHistoryEntryResponse(
                id=entry.id,
                product_name=entry.product_name,
                description=entry.description,
                hs_code=entry.hs_code,
                confidence=entry.confidence,
                method=entry.method,
                status=entry.status,
                requires_review=entry.requires_review,
                timestamp=entry.timestamp,
            )
            for entry in entries
        ],
        total=len(entries),
    )
