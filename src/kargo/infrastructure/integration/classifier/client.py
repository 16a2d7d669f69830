"""HTTP client for the HS code classifier service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from kargo.domain.classification import (
    ClassifierResponseError,
    ClassifierUnavailableError,
)
from kargo_contracts import (
    ClassifyRequest,
    ClassifyResponse,
    HealthResponse,
)

if TYPE_CHECKING:
    from kargo_config import Settings
    from kargo_contracts import ProductInput

logger = logging.getLogger(__name__)


class ClassifierServiceClient:
    """HTTP client wrapper for the classifier service API."""

    def __init__(  # noqa: PLR0913
        self,
        base_url: str,
        timeout: float = 30.0,
        enabled: bool = True,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._enabled = enabled
        self._api_key = api_key
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> ClassifierServiceClient:
        api_key = settings.classifier_service_api_key
        return cls(
            base_url=settings.classifier_service_url,
            timeout=settings.classifier_service_timeout,
            enabled=settings.classifier_service_enabled,
            api_key=api_key.get_secret_value() if api_key else None,
        )

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def base_url(self) -> str:
        return self._base_url

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self._api_key:
                headers["Authorization"] = f"Bearer {self._api_key}"
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def health_check(self) -> HealthResponse | None:
        """Check if the classifier service is healthy."""
        if not self._enabled:
            return None
        try:
            client = await self._get_client()
            response = await client.get("/health")
            response.raise_for_status()
            return HealthResponse.model_validate(response.json())
        except Exception as e:
            logger.warning("Classifier health check failed: %s", e)
            return None

    async def classify(self, product: ProductInput) -> ClassifyResponse:
        """Classify a single product.

        Raises
        ------
        ClassifierUnavailableError
            If the service is disabled, unreachable or times out.
        ClassifierResponseError
            If the service answers with an error status or a body that does
            not match the contract.
        """
        if not self._enabled:
            raise ClassifierUnavailableError("Classifier service is disabled")

        request = ClassifyRequest(product=product)
        try:
            client = await self._get_client()
            response = await client.post(
                "/classify",
                content=request.model_dump_json(),
            )
            response.raise_for_status()
            return ClassifyResponse.model_validate(response.json())
        except httpx.ConnectError as e:
            logger.warning("Classifier connection failed: %s", e)
            msg = f"Could not connect to classifier at {self._base_url}"
            raise ClassifierUnavailableError(msg) from e
        except httpx.TimeoutException as e:
            logger.warning("Classifier timeout: %s", e)
            msg = f"Classifier timed out after {self._timeout:.0f}s"
            raise ClassifierUnavailableError(msg) from e
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Classifier returned error %d: %s",
                e.response.status_code,
                e.response.text[:200] if e.response.text else "no body",
            )
            raise _status_error(e.response) from e
        except ValueError as e:
            # Covers both invalid JSON and contract validation errors
            logger.warning("Malformed classifier response: %s", e)
            raise ClassifierResponseError("malformed classifier response") from e


def _status_error(response: httpx.Response) -> ClassifierResponseError:
    status_code = response.status_code
    if status_code == httpx.codes.TOO_MANY_REQUESTS:
        return ClassifierResponseError("rate limited", status_code)
    if status_code in (httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN):
        return ClassifierResponseError("classifier authentication failed", status_code)

    detail = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("detail"), str):
        detail = body["detail"]

    return ClassifierResponseError(
        detail or f"classifier returned HTTP {status_code}",
        status_code,
    )
