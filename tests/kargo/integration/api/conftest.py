"""Fixtures for API tests.

The app runs in-process through httpx's ASGI transport with a fake
classifier and no pacing delays.
"""

import asyncio

import httpx
import pytest
import pytest_asyncio

from kargo.application.ports import (
    ClassifierGatewayPort,
    HSCodeClassification,
    ProductForClassification,
)
from kargo.domain.classification import ClassifierResponseError
from kargo.presentation.api.app import API_V1_PREFIX, create_app
from kargo_config import Settings
from tests.shared.fixtures.factories import make_classification


class FakeClassifier(ClassifierGatewayPort):
    """Classifier double answering from a title -> code table.

    Titles mapped to ``None`` are rejected as rate limited. When ``gate`` is
    set, every call waits for it first.
    """

    def __init__(self, codes: dict[str, str | None] | None = None):
        self.codes = codes or {}
        self.calls: list[ProductForClassification] = []
        self.gate: asyncio.Event | None = None
        self.entered = asyncio.Event()

    async def classify(self, product: ProductForClassification) -> HSCodeClassification:
        self.calls.append(product)
        self.entered.set()
        if self.gate is not None:
            await self.gate.wait()
        code = self.codes.get(product.title, "6109.10")
        if code is None:
            raise ClassifierResponseError("rate limited", 429)
        return make_classification(code)


@pytest.fixture
def api_v1_prefix() -> str:
    return API_V1_PREFIX


@pytest.fixture
def api_settings() -> Settings:
    return Settings(
        api_debug=True,
        batch_pickup_delay_seconds=0,
        batch_inter_call_delay_seconds=0,
    )


@pytest.fixture
def classifier() -> FakeClassifier:
    return FakeClassifier()


@pytest.fixture
def app(api_settings, classifier):
    return create_app(settings=api_settings, gateway=classifier)


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
