"""Batch schemas for API request/response models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from kargo.domain.batch import BatchItemResult, BatchJob
from kargo.domain.orders import ItemStatus, Order, OrderItem


class OrderItemRequest(BaseModel):
    """A product line of a submitted order."""

    id: str = Field(..., description="Item (product) identifier")
    title: str = Field(..., min_length=1, description="Product title")
    description: str = Field("", description="Product description")
    hs_code: Optional[str] = Field(
        None,
        description="Existing HS code; items that have one are never reclassified",
    )
    status: ItemStatus = Field(
        ItemStatus.UNCLASSIFIED,
        description="Current classification status of the item",
    )
    material: Optional[str] = None
    product_type: Optional[str] = None
    vendor: Optional[str] = None
    origin_country: Optional[str] = None

    def to_domain(self) -> OrderItem:
        return OrderItem(
            id=self.id,
            title=self.title,
            description=self.description,
            hs_code=self.hs_code or None,
            status=self.status,
            material=self.material,
            product_type=self.product_type,
            vendor=self.vendor,
            origin_country=self.origin_country,
        )


class OrderRequest(BaseModel):
    """An order submitted for batch classification."""

    id: str = Field(..., description="Order identifier")
    order_number: str = Field(..., description="Human-readable order number")
    customer: Optional[str] = None
    country_code: Optional[str] = None
    items: list[OrderItemRequest] = Field(default_factory=list)

    def to_domain(self) -> Order:
        return Order(
            id=self.id,
            order_number=self.order_number,
            customer=self.customer,
            country_code=self.country_code,
            items=[item.to_domain() for item in self.items],
        )


class BatchSubmitRequest(BaseModel):
    """Request schema for starting a batch classification job.

    An empty order list is accepted and yields a job that completes
    immediately with zero orders.
    """

    orders: list[OrderRequest] = Field(default_factory=list)
    name: Optional[str] = Field(
        None,
        max_length=100,
        description="Display name (default: 'Batch #<n>')",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "orders": [
                        {
                            "id": "gid-1001",
                            "order_number": "#1001",
                            "items": [
                                {
                                    "id": "p-1",
                                    "title": "Men's Cotton T-Shirt",
                                    "description": "100% cotton, round neck",
                                },
                            ],
                        },
                    ],
                },
            ],
        },
    )

    def to_domain(self) -> list[Order]:
        return [order.to_domain() for order in self.orders]


class BatchSubmitResponse(BaseModel):
    job_id: str = Field(..., description="Id of the queued batch job")


class BatchItemResultResponse(BaseModel):
    """Outcome of one order within a batch."""

    order_id: str
    order_number: str
    status: str = Field(..., description="success | failed")
    message: str
    hs_codes_generated: int

    @classmethod
    def from_domain(cls, result: BatchItemResult) -> "BatchItemResultResponse":
        return cls(
            order_id=result.order_id,
            order_number=result.order_number,
            status=result.status.value,
            message=result.message,
            hs_codes_generated=result.hs_codes_generated,
        )


class BatchJobResponse(BaseModel):
    """A batch job with its progress and per-order results."""

    id: str
    name: str
    total: int
    processed: int
    failed: int
    status: str = Field(..., description="queued | processing | completed | failed")
    progress_percent: float
    created_at: datetime
    completed_at: Optional[datetime] = None
    results: list[BatchItemResultResponse]

    @classmethod
    def from_domain(cls, job: BatchJob) -> "BatchJobResponse":
        return cls(
            id=job.id,
            name=job.name,
            total=job.total,
            processed=job.processed,
            failed=job.failed,
            status=job.status.value,
            progress_percent=job.progress_percent,
            created_at=job.created_at,
            completed_at=job.completed_at,
            results=[BatchItemResultResponse.from_domain(r) for r in job.results],
        )


class BatchJobListResponse(BaseModel):
    jobs: list[BatchJobResponse]
    total: int


class BatchOverviewResponse(BaseModel):
    """Active and past jobs plus aggregate order outcomes."""

    active_jobs: list[BatchJobResponse]
    past_jobs: list[BatchJobResponse]
    total_orders_processed: int
    total_orders_failed: int
    success_rate: float = Field(..., description="Share of successful orders (0-100)")


class ClassificationHistoryEntryResponse(BaseModel):
    id: str
    product_name: str
    description: str
    hs_code: str
    confidence: float
    method: str
    status: str
    requires_review: bool
    timestamp: datetime


class ClassificationHistoryResponse(BaseModel):
    entries: list[ClassificationHistoryEntryResponse]
    total: int
