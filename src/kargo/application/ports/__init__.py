"""Application ports (interfaces to external collaborators)."""

from kargo.application.ports.classifier_gateway import (
    ClassifierGatewayPort,
    HSCodeCandidate,
    HSCodeClassification,
    ProductForClassification,
)

__all__ = [
    "ClassifierGatewayPort",
    "HSCodeCandidate",
    "HSCodeClassification",
    "ProductForClassification",
]
