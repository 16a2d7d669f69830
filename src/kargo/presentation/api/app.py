"""FastAPI application factory for the batch classification API.

``create_app`` builds the job store and batch runner once per application and
exposes them on ``app.state``. Batch and history routes live
under ``/api/v1``; ``/health`` stays unversioned.
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kargo.application.ports import ClassifierGatewayPort
from kargo.application.services import (
    BatchClassificationRunner,
    BatchJobStore,
    ClassificationHistoryService,
    JobSubscriptionBus,
)
from kargo.infrastructure.integration.classifier import (
    ClassifierServiceAdapter,
    ClassifierServiceClient,
)
from kargo.presentation.api.exception_handlers import setup_exception_handlers
from kargo.presentation.api.routers import batches_router, history_router
from kargo_config.settings import Settings, get_settings


@lru_cache(maxsize=1)
def _configure_logging() -> None:
    """Configure application logging.

    Console output with timestamps and module names, the configured level
    for kargo modules and WARNING for noisy third-party libraries.
    """
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,  # Override any existing config
    )

    logging.getLogger("kargo").setLevel(log_level)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
API_V1_PREFIX = "/api/v1"

OPENAPI_TAGS = [
    {
        "name": "Batches",
        "description": """Batch HS code classification of orders.

**Job lifecycle:**
- `queued`: accepted, waiting to be picked up
- `processing`: orders are classified one at a time
- `completed`: every order was handled (individual orders may have failed)
- `failed`: reserved; order failures are reported per result instead

**Progress:**
- Poll `/batches/{job_id}` or list all jobs with `/batches`
- Stream live snapshots via `/batches/stream` or one job via
  `/batches/{job_id}/events` (Server-Sent Events)
""",
    },
    {
        "name": "History",
        "description": """HS codes assigned by batch jobs, newest first.

Search by product name or code prefix and filter by minimum confidence.
""",
    },
    {
        "name": "Health",
        "description": "Service health monitoring endpoints.",
    },
    {
        "name": "Info",
        "description": "API information and discovery.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Starting Kargo API v%s...", API_VERSION)
    client: ClassifierServiceClient | None = app.state.classifier_client
    if client is not None:
        await _check_classifier_health(client)
    yield

    logger.info("Shutting down Kargo API...")
    if client is not None:
        await client.close()


async def _check_classifier_health(client: ClassifierServiceClient) -> None:
    """Check classifier availability on startup."""
    if not client.enabled:
        logger.info("Classifier disabled (CLASSIFIER_SERVICE_ENABLED=false)")
        return

    health = await client.health_check()
    if health and health.status == "ok":
        logger.info(
            "Classifier healthy at %s (model: %s)",
            client.base_url,
            health.model_name or "unknown",
        )
    else:
        logger.warning(
            "Classifier unavailable at startup (batch orders will fail): %s",
            client.base_url,
        )


def create_v1_router() -> APIRouter:
    """Create the v1 API router with all endpoints.

    Returns
    -------
    APIRouter with all v1 endpoints mounted.
    """
    v1_router = APIRouter()
    v1_router.include_router(batches_router, prefix="/batches", tags=["Batches"])
    v1_router.include_router(history_router, prefix="/history", tags=["History"])
    return v1_router


def create_app(
    settings: Settings | None = None,
    gateway: ClassifierGatewayPort | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Optional settings override for testing.
    gateway
        Optional classifier override. When omitted, the HTTP classifier
        service configured in settings is used.

    Returns
    -------
    Configured FastAPI application instance.
    """
    _configure_logging()

    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description=(
            "**Batch HS code classification** of e-commerce orders "
            "for customs declarations."
        ),
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )

    # One store, bus and runner per application
    client = None
    if gateway is None:
        client = ClassifierServiceClient.from_settings(settings)
        gateway = ClassifierServiceAdapter(client)

    job_store = BatchJobStore(
        bus=JobSubscriptionBus(),
        max_retained_jobs=settings.batch_max_retained_jobs,
    )
    history = ClassificationHistoryService()
    app.state.job_store = job_store
    app.state.classification_history = history
    app.state.classifier_client = client
    app.state.batch_runner = BatchClassificationRunner(
        job_store=job_store,
        classifier=gateway,
        history=history,
        pickup_delay=settings.batch_pickup_delay_seconds,
        inter_call_delay=settings.batch_inter_call_delay_seconds,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(create_v1_router(), prefix=API_V1_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Health check endpoint.

        Unversioned for load balancer/monitoring compatibility.
        """
        return {
            "status": "healthy",
            "version": API_VERSION,
            "api_versions": ["v1"],
        }

    @app.get("/", tags=["Info"])
    async def root() -> dict:
        """API root endpoint with version information."""
        return {
            "name": f"{settings.app_name} API",
            "version": API_VERSION,
            "docs": "/docs" if settings.api_debug else None,
            "api_base": API_V1_PREFIX,
            "endpoints": {
                "health": "/health",
                "batches": f"{API_V1_PREFIX}/batches",
                "history": f"{API_V1_PREFIX}/history",
            },
        }

    return app


# Application instance for uvicorn
app = create_app()
