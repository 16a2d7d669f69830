"""Batch router for HS code batch classification endpoints."""

import json
import logging

from fastapi import APIRouter, status
from fastapi.responses import StreamingResponse

from kargo.application.queries import BatchOverviewQuery
from kargo.application.services import LatestSnapshotChannel
from kargo.presentation.api.dependencies import BatchRunner, JobStore
from kargo.presentation.api.schemas.batches import (
    BatchJobListResponse,
    BatchJobResponse,
    BatchOverviewResponse,
    BatchSubmitRequest,
    BatchSubmitResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


@router.post(
    "",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Start a batch classification job",
    responses={
        202: {"description": "Job queued; poll or stream it by id"},
    },
)
async def submit_batch(
    request: BatchSubmitRequest,
    runner: BatchRunner,
) -> BatchSubmitResponse:
    """
    Queue a batch of orders for HS code classification.

    Returns immediately with the job id. Orders are processed one at a time
    in submission order; items that already carry an HS code are skipped.
    Failures of the classifier are recorded per order in the job results and
    never fail the request itself.
    """
    job_id = runner.submit(request.to_domain(), name=request.name)
    return BatchSubmitResponse(job_id=job_id)


@router.get(
    "",
    summary="List batch jobs",
)
async def list_batches(store: JobStore) -> BatchJobListResponse:
    """List all retained batch jobs, most recent first."""
    jobs = store.list_jobs()
    return BatchJobListResponse(
        jobs=[BatchJobResponse.from_domain(job) for job in jobs],
        total=len(jobs),
    )


@router.get(
    "/overview",
    summary="Get batch overview",
)
async def get_batch_overview(store: JobStore) -> BatchOverviewResponse:
    """
    Split jobs into active (queued/processing) and past ones and report
    aggregate order outcomes across all retained jobs.
    """
    result = BatchOverviewQuery(store).execute()

    return BatchOverviewResponse(
        active_jobs=[BatchJobResponse.from_domain(job) for job in result.active_jobs],
        past_jobs=[BatchJobResponse.from_domain(job) for job in result.past_jobs],
        total_orders_processed=result.total_orders_processed,
        total_orders_failed=result.total_orders_failed,
        success_rate=result.success_rate,
    )


@router.get(
    "/stream",
    summary="Stream job list snapshots",
    responses={
        200: {
            "description": "SSE stream of job list snapshots",
            "content": {"text/event-stream": {}},
        },
    },
)
async def stream_batches(store: JobStore) -> StreamingResponse:
    """
    Stream the job list as Server-Sent Events.

    The current list is sent right away, then again after every change.
    A slow client skips intermediate snapshots and always receives the
    latest one. The stream stays open until the client disconnects.

    ## SSE Format

    ```
    event: jobs
    data: {"jobs": [{"id": "...", "status": "processing", ...}]}

    ```
    """

    async def event_generator():
        async with LatestSnapshotChannel(store.subscribe) as channel:
            async for snapshot in channel:
                yield _format_sse_event(
                    "jobs",
                    {"jobs": [job.to_dict() for job in snapshot]},
                )

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.get(
    "/{job_id}",
    summary="Get a batch job",
    responses={
        404: {"description": "Job not found"},
    },
)
async def get_batch(job_id: str, store: JobStore) -> BatchJobResponse:
    """Get a single batch job with its per-order results."""
    return BatchJobResponse.from_domain(store.get_job(job_id))


@router.get(
    "/{job_id}/events",
    summary="Stream progress of one batch job",
    responses={
        200: {
            "description": "SSE stream of job progress events",
            "content": {"text/event-stream": {}},
        },
        404: {"description": "Job not found"},
    },
)
async def stream_batch_events(job_id: str, store: JobStore) -> StreamingResponse:
    """
    Stream progress of a single job until it finishes.

    ## Event Types

    - **job_updated**: the job changed (status, processed count, results)
    - **job_completed**: the job reached a terminal state; the stream ends
    - **job_missing**: the job is no longer retained; the stream ends
    """
    store.get_job(job_id)  # 404 before the stream starts
    logger.debug("Streaming events for batch job %s", job_id)

    async def event_generator():
        last_sent = None
        async with LatestSnapshotChannel(store.subscribe) as channel:
            async for snapshot in channel:
                job = next((j for j in snapshot if j.id == job_id), None)
                if job is None:
                    yield _format_sse_event("job_missing", {"id": job_id})
                    return
                if job.is_terminal:
                    yield _format_sse_event("job_completed", job.to_dict())
                    return
                if job is not last_sent:
                    yield _format_sse_event("job_updated", job.to_dict())
                    last_sent = job

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


def _format_sse_event(event_type: str, data: dict) -> str:
    """Format data as an SSE event string."""
    json_data = json.dumps(data)
    return f"event: {event_type}\ndata: {json_data}\n\n"
