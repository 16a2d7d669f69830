"""Classifier service API contracts.

This package defines the API contract between the Kargo backend and the
HS code classifier service.
"""

from kargo_contracts.classify import (
    ClassifyRequest,
    ClassifyResponse,
    HealthResponse,
    HSCodeAlternative,
    ProductInput,
)

__all__ = [
    "ProductInput",
    "ClassifyRequest",
    "HSCodeAlternative",
    "ClassifyResponse",
    "HealthResponse",
]
