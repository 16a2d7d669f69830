"""Orders domain - work units submitted for batch classification."""

from kargo.domain.orders.entities import ItemStatus, Order, OrderItem

__all__ = [
    "ItemStatus",
    "Order",
    "OrderItem",
]
