"""Classifier service integration for HS code classification."""

from kargo.infrastructure.integration.classifier.adapter import (
    ClassifierServiceAdapter,
)
from kargo.infrastructure.integration.classifier.client import (
    ClassifierServiceClient,
)

__all__ = [
    "ClassifierServiceAdapter",
    "ClassifierServiceClient",
]
