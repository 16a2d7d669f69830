"""Classifier service adapter implementing the application port."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kargo.application.ports import (
    ClassifierGatewayPort,
    HSCodeCandidate,
    HSCodeClassification,
    ProductForClassification,
)
from kargo_contracts import ProductInput

if TYPE_CHECKING:
    from kargo.infrastructure.integration.classifier.client import (
        ClassifierServiceClient,
    )

logger = logging.getLogger(__name__)


class ClassifierServiceAdapter(ClassifierGatewayPort):
    """Infrastructure adapter that implements ClassifierGatewayPort.

    Translates domain objects to classifier contracts and delegates to the
    HTTP client. Client errors propagate unchanged.
    """

    def __init__(self, client: ClassifierServiceClient):
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client.enabled

    async def classify(
        self,
        product: ProductForClassification,
    ) -> HSCodeClassification:
        request = ProductInput(
            title=product.title,
            description=product.description,
            material=product.material,
            product_type=product.product_type,
            vendor=product.vendor,
            origin_country=product.origin_country,
        )

        response = await self._client.classify(request)

        if response.requires_review:
            logger.debug(
                "Classifier flagged %r for review (conf=%.0f)",
                product.title,
                response.confidence,
            )

        return HSCodeClassification(
            hs_code=response.hs_code.strip(),
            confidence=response.confidence,
            description=response.description,
            reasoning=response.reasoning,
            chapter=response.chapter,
            alternatives=tuple(
                HSCodeCandidate(
                    code=alt.code,
                    confidence=alt.confidence,
                    reason=alt.reason,
                )
                for alt in response.alternatives
            ),
            requires_review=response.requires_review,
        )
