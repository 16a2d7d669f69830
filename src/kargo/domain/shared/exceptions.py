"""Domain exceptions and the error codes exposed to API clients.

Every error raised by the domain and application layers derives from
DomainException so the presentation layer can turn it into a response with a
machine-readable code in one place.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Values of the ``code`` field in API error responses. Clients rely on them."""

    # Bad input
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_FORMAT = "INVALID_FORMAT"

    # Missing entities
    ENTITY_NOT_FOUND = "ENTITY_NOT_FOUND"
    JOB_NOT_FOUND = "JOB_NOT_FOUND"

    # Rule violations
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"

    # Upstream classifier
    CLASSIFIER_UNAVAILABLE = "CLASSIFIER_UNAVAILABLE"
    CLASSIFICATION_FAILED = "CLASSIFICATION_FAILED"

    INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainException(Exception):  # NOQA: N818
    """Base class for domain errors.

    Parameters
    ----------
    message
        Safe to show to end users.
    code
        Overrides the class's ``default_code``.
    details
        Extra context for logs; never sent to clients.
    """

    default_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code.value})"


class ValidationError(DomainException):
    """Input failed validation."""

    default_code = ErrorCode.VALIDATION_ERROR


class BusinessRuleViolation(DomainException):
    """An operation would break a domain rule."""

    default_code = ErrorCode.BUSINESS_RULE_VIOLATION


class EntityNotFoundError(DomainException):
    """A referenced entity does not exist."""

    default_code = ErrorCode.ENTITY_NOT_FOUND
