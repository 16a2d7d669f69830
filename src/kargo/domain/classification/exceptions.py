"""Classification domain exceptions.

These exceptions represent failures of the external HS code classifier.
The batch runner records their message verbatim in the order's result.
"""

from kargo.domain.shared.exceptions import DomainException, ErrorCode


class ClassificationError(DomainException):
    """Base exception for classifier failures."""

    default_code = ErrorCode.CLASSIFICATION_FAILED

    def __init__(
        self,
        message: str = "Classification failed",
        details: dict | None = None,
    ) -> None:
        super().__init__(message, details=details)


class ClassifierUnavailableError(ClassificationError):
    """Raised when the classifier cannot be reached or is disabled."""

    default_code = ErrorCode.CLASSIFIER_UNAVAILABLE

    def __init__(self, message: str = "Classifier service unavailable") -> None:
        super().__init__(message)


class ClassifierResponseError(ClassificationError):
    """Raised when the classifier rejects a request or answers garbage."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(
            message,
            details={"status_code": status_code} if status_code else None,
        )
        self.status_code = status_code
