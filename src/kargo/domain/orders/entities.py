"""Order and order item entities.

Orders are the work units of a batch. Their items are the only state the
batch runner mutates: an unclassified item that receives an HS code becomes
classified in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ItemStatus(str, Enum):
    """Classification status of an order item."""

    CLASSIFIED = "classified"
    UNCLASSIFIED = "unclassified"
    REVIEW_NEEDED = "review_needed"


@dataclass
class OrderItem:
    """A single product line that needs an HS code."""

    id: str
    title: str
    description: str = ""
    hs_code: str | None = None
    status: ItemStatus = ItemStatus.UNCLASSIFIED
    material: str | None = None
    product_type: str | None = None
    vendor: str | None = None
    origin_country: str | None = None

    @property
    def needs_classification(self) -> bool:
        if self.hs_code:
            return False
        return self.status != ItemStatus.CLASSIFIED

    def apply_classification(self, hs_code: str) -> None:
        self.hs_code = hs_code
        self.status = ItemStatus.CLASSIFIED


@dataclass
class Order:
    """An identified collection of items, processed as one unit of a batch."""

    id: str
    order_number: str
    items: list[OrderItem] = field(default_factory=list)
    customer: str | None = None
    country_code: str | None = None

    @property
    def has_items(self) -> bool:
        return bool(self.items)

    @property
    def pending_items(self) -> list[OrderItem]:
        return [item for item in self.items if item.needs_classification]
