"""Exception handlers translating domain errors into JSON error bodies.

Every error leaves the API as ``{"detail": <message>, "code": <ErrorCode>}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from kargo.domain.shared.exceptions import DomainException, ErrorCode

logger = logging.getLogger(__name__)


ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_FORMAT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ENTITY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.JOB_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_STATUS_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.BUSINESS_RULE_VIOLATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    # Upstream classifier problems
    ErrorCode.CLASSIFICATION_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.CLASSIFIER_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: DomainException) -> int:
    return ERROR_CODE_TO_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST)


def _error_body(message: str, code: ErrorCode) -> dict[str, str]:
    return {"detail": message, "code": code.value}


def setup_exception_handlers(app: FastAPI) -> None:
    """Attach the domain and catch-all handlers to ``app``."""

    @app.exception_handler(DomainException)
    async def handle_domain_exception(
        request: Request, exc: DomainException
    ) -> JSONResponse:
        status_code = status_for(exc)
        level = logging.ERROR if status_code >= 500 else logging.WARNING
        logger.log(
            level,
            "%s %s -> %d %s: %s %s",
            request.method,
            request.url.path,
            status_code,
            exc.code.value,
            exc.message,
            exc.details or "",
        )
        return JSONResponse(
            status_code=status_code,
            content=_error_body(exc.message, exc.code),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled %s on %s %s",
            type(exc).__name__,
            request.method,
            request.url.path,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(
                "An unexpected error occurred", ErrorCode.INTERNAL_ERROR
            ),
        )
