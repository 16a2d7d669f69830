"""Batch HS code classification runner.

This service drives a batch job from ``queued`` to ``completed``: it walks
the submitted orders in order, classifies every item that has no HS code yet
through the classifier gateway, and pushes the job through the job store
after each order so observers see progress order by order.

Orders and items are processed strictly one at a time with a pacing delay
between classifier calls. The classifier is rate limited; parallelizing this
loop requires revisiting that limit first.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kargo.application.ports import ProductForClassification
from kargo.domain.batch import BatchItemResult, BatchJob, JobStatus, ResultStatus
from kargo.domain.shared.time import utc_now

if TYPE_CHECKING:
    from kargo.application.ports import ClassifierGatewayPort
    from kargo.application.services.batch_job_store import BatchJobStore
    from kargo.application.services.classification_history import (
        ClassificationHistoryService,
    )
    from kargo.domain.orders import Order, OrderItem

logger = logging.getLogger(__name__)

NO_ITEMS_MESSAGE = "No items to classify in order"
SKIPPED_MESSAGE = "Items already classified or skipped"
CLASSIFIER_ERROR_PREFIX = "AI Service Error: "


@dataclass(frozen=True)
class _OrderOutcome:
    """Outcome of classifying the items of one order."""

    status: ResultStatus
    message: str
    codes_generated: int


class BatchClassificationRunner:
    """Runs batch classification jobs in the background."""

    def __init__(  # noqa: PLR0913
        self,
        job_store: BatchJobStore,
        classifier: ClassifierGatewayPort,
        history: ClassificationHistoryService | None = None,
        pickup_delay: float = 0.5,
        inter_call_delay: float = 1.0,
    ):
        self._store = job_store
        self._classifier = classifier
        self._history = history
        self._pickup_delay = pickup_delay
        self._inter_call_delay = inter_call_delay
        self._tasks: dict[str, asyncio.Task[BatchJob | None]] = {}

    @property
    def active_job_ids(self) -> list[str]:
        return list(self._tasks)

    def submit(self, orders: Sequence[Order], name: str | None = None) -> str:
        """Create a job for the orders and start processing it.

        Returns the job id immediately; processing continues as a task on
        the running event loop.

        Raises
        ------
        RuntimeError
            If called outside a running event loop.
        """
        orders = list(orders)
        loop = asyncio.get_running_loop()
        job = self._store.create_job(total_units=len(orders), name=name)

        task = loop.create_task(
            self._process_batch(job.id, orders),
            name=f"batch-{job.id}",
        )
        self._tasks[job.id] = task
        task.add_done_callback(lambda _, job_id=job.id: self._tasks.pop(job_id, None))

        logger.info("Queued %s (%s) with %d order(s)", job.name, job.id, len(orders))
        return job.id

    async def wait_for(self, job_id: str) -> BatchJob:
        """Wait until a submitted job has been driven to its end state.

        While the job is running its final state comes from the background
        task, so it is returned even if retention evicted the job from the
        store meanwhile. Once the task is gone the store is consulted.

        Raises
        ------
        BatchJobNotFoundError
            If the job is neither running nor in the store.
        """
        task = self._tasks.get(job_id)
        if task is not None:
            job = await task
            if job is not None:
                return job
        return self._store.get_job(job_id)

    async def run(self, orders: Sequence[Order], name: str | None = None) -> BatchJob:
        """Submit orders and wait for the finished job."""
        job_id = self.submit(orders, name=name)
        return await self.wait_for(job_id)

    async def _process_batch(
        self, job_id: str, orders: list[Order]
    ) -> BatchJob | None:
        try:
            await asyncio.sleep(self._pickup_delay)
            self._store.update_job(job_id, status=JobStatus.PROCESSING)

            for order in orders:
                outcome = await self._process_order(order)
                if not self._record_outcome(job_id, order, outcome):
                    logger.warning(
                        "Batch job %s vanished from the store, stopping", job_id
                    )
                    return None

            job = self._store.update_job(
                job_id,
                status=JobStatus.COMPLETED,
                completed_at=utc_now(),
            )
        except Exception:
            logger.exception("Batch job %s aborted unexpectedly", job_id)
            return None

        if job is not None:
            logger.info(
                "Finished %s: %d processed, %d failed",
                job.name,
                job.processed,
                job.failed,
            )
        return job

    async def _process_order(self, order: Order) -> _OrderOutcome:
        if not order.has_items:
            return _OrderOutcome(ResultStatus.SUCCESS, NO_ITEMS_MESSAGE, 0)

        codes_generated = 0
        try:
            for item in order.items:
                if not item.needs_classification:
                    continue
                if await self._classify_item(item):
                    codes_generated += 1
                await asyncio.sleep(self._inter_call_delay)
        except Exception as e:
            logger.warning(
                "Failed to classify order %s: %s",
                order.order_number,
                e,
            )
            return _OrderOutcome(
                ResultStatus.FAILED,
                CLASSIFIER_ERROR_PREFIX + (str(e) or type(e).__name__),
                codes_generated,
            )

        if codes_generated == 0:
            return _OrderOutcome(ResultStatus.SUCCESS, SKIPPED_MESSAGE, 0)
        return _OrderOutcome(
            ResultStatus.SUCCESS,
            f"Classified {codes_generated} item(s) with AI classifier",
            codes_generated,
        )

    async def _classify_item(self, item: OrderItem) -> bool:
        classification = await self._classifier.classify(
            ProductForClassification(
                title=item.title,
                description=item.description,
                material=item.material,
                product_type=item.product_type,
                vendor=item.vendor,
                origin_country=item.origin_country,
            )
        )
        if not classification.hs_code:
            logger.debug("Classifier returned no code for item %s", item.id)
            return False

        item.apply_classification(classification.hs_code)
        if self._history is not None:
            self._history.record(item, classification)

        logger.debug(
            "Classified %s -> %s (conf=%.0f)",
            item.title,
            classification.hs_code,
            classification.confidence,
        )
        return True

    def _record_outcome(
        self,
        job_id: str,
        order: Order,
        outcome: _OrderOutcome,
    ) -> bool:
        current = self._store.find_job(job_id)
        if current is None:
            return False

        result = BatchItemResult(
            order_id=order.id,
            order_number=order.order_number,
            status=outcome.status,
            message=outcome.message,
            hs_codes_generated=outcome.codes_generated,
        )
        failed = current.failed + (1 if result.is_failure else 0)
        self._store.update_job(
            job_id,
            processed=current.processed + 1,
            failed=failed,
            results=(*current.results, result),
        )
        return True
