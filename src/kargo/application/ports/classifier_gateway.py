"""Classifier gateway port for the application layer.

This abstracts the HS code classifier, allowing the batch runner to remain
independent of HTTP clients and external API contracts.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ProductForClassification:
    """Domain representation of a product to be classified."""

    title: str
    description: str
    material: str | None = None
    product_type: str | None = None
    vendor: str | None = None
    origin_country: str | None = None


@dataclass(frozen=True)
class HSCodeCandidate:
    """An alternative HS code with its confidence."""

    code: str
    confidence: float
    reason: str = ""


@dataclass(frozen=True)
class HSCodeClassification:
    """Result of classifying a single product."""

    hs_code: str
    confidence: float  # 0-100
    description: str = ""
    reasoning: str = ""
    chapter: str = ""
    alternatives: tuple[HSCodeCandidate, ...] = ()
    requires_review: bool = False


class ClassifierGatewayPort(ABC):
    """Port interface for the HS code classifier.

    Implementations may be slow and may fail. Failures are raised as
    exceptions carrying a human-readable message; they are never swallowed.
    """

    @abstractmethod
    async def classify(
        self,
        product: ProductForClassification,
    ) -> HSCodeClassification:
        """Classify a single product.

        Raises
        ------
        ClassificationError
            If the classifier is unavailable or rejects the request.
        """
