"""Log of HS codes assigned by the batch runner."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from kargo.domain.shared.time import utc_now

if TYPE_CHECKING:
    from kargo.application.ports import HSCodeClassification
    from kargo.domain.orders import OrderItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationHistoryEntry:
    """A single recorded classification."""

    product_name: str
    description: str
    hs_code: str
    confidence: float
    method: str = "AI_TEXT"
    status: str = "active"
    requires_review: bool = False
    id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_name": self.product_name,
            "description": self.description,
            "hs_code": self.hs_code,
            "confidence": self.confidence,
            "method": self.method,
            "status": self.status,
            "requires_review": self.requires_review,
            "timestamp": self.timestamp.isoformat(),
        }


class ClassificationHistoryService:
    """In-memory classification history, newest entries first."""

    def __init__(self) -> None:
        self._entries: list[ClassificationHistoryEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def record(
        self,
        item: OrderItem,
        classification: HSCodeClassification,
    ) -> ClassificationHistoryEntry:
        entry = ClassificationHistoryEntry(
            product_name=item.title,
            description=item.description[:200],
            hs_code=classification.hs_code,
            confidence=classification.confidence,
            requires_review=classification.requires_review,
        )
        self._entries.insert(0, entry)
        logger.debug("History: %s -> %s", entry.product_name, entry.hs_code)
        return entry

    def search(
        self,
        term: str = "",
        min_confidence: float = 0,
    ) -> list[ClassificationHistoryEntry]:
        """Filter entries by product name or HS code and minimum confidence.

        Product names match case-insensitively; HS codes match as a plain
        substring.
        """
        needle = term.lower()
        return [
            entry
            for entry in self._entries
            if (needle in entry.product_name.lower() or term in entry.hs_code)
            and entry.confidence >= min_confidence
        ]
