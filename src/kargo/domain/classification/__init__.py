"""Classification domain - errors raised by the HS code classifier."""

from kargo.domain.classification.exceptions import (
    ClassificationError,
    ClassifierResponseError,
    ClassifierUnavailableError,
)

__all__ = [
    "ClassificationError",
    "ClassifierResponseError",
    "ClassifierUnavailableError",
]
