"""Fan-out of job-list snapshots to observers.

The bus decouples job store mutations from whoever watches them (the SSE
endpoint, the CLI progress display, tests). Callbacks run synchronously and
in registration order. A failing callback is logged and skipped; the other
observers and later notifications are unaffected.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kargo.domain.batch import BatchJob

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[list["BatchJob"]], None]
Unsubscribe = Callable[[], None]


class JobSubscriptionBus:
    """Publish/subscribe registry for job-list snapshots."""

    def __init__(self) -> None:
        self._subscribers: dict[int, SnapshotCallback] = {}
        self._next_token = 0

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(
        self,
        callback: SnapshotCallback,
        initial_snapshot: list[BatchJob] | None = None,
    ) -> Unsubscribe:
        """Register a callback and replay the current snapshot to it.

        Returns a callable that removes the subscription. Calling it more
        than once has no further effect.
        """
        token = self._next_token
        self._next_token += 1
        self._subscribers[token] = callback

        if initial_snapshot is not None:
            self._deliver(token, callback, initial_snapshot)

        def unsubscribe() -> None:
            self._subscribers.pop(token, None)

        return unsubscribe

    def notify(self, snapshot: list[BatchJob]) -> None:
        """Deliver the same snapshot to every subscriber."""
        for token, callback in list(self._subscribers.items()):
            self._deliver(token, callback, snapshot)

    def _deliver(
        self,
        token: int,
        callback: SnapshotCallback,
        snapshot: list[BatchJob],
    ) -> None:
        try:
            callback(snapshot)
        except Exception:
            logger.exception("Job subscriber %d raised while handling snapshot", token)


class LatestSnapshotChannel:
    """Async iterator over snapshots that keeps only the most recent one.

    A slow reader never sees snapshots out of order; it may skip
    intermediate ones and always resumes with the newest.
    """

    def __init__(
        self,
        subscribe: Callable[[SnapshotCallback], Unsubscribe],
    ) -> None:
        self._latest: list[BatchJob] | None = None
        self._ready = asyncio.Event()
        self._closed = False
        self._unsubscribe = subscribe(self._on_snapshot)

    def _on_snapshot(self, snapshot: list[BatchJob]) -> None:
        self._latest = snapshot
        self._ready.set()

    async def next(self) -> list[BatchJob]:
        await self._ready.wait()
        self._ready.clear()
        return self._latest or []

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._unsubscribe()

    def __aiter__(self) -> LatestSnapshotChannel:
        return self

    async def __anext__(self) -> list[BatchJob]:
        if self._closed:
            raise StopAsyncIteration
        return await self.next()

    async def __aenter__(self) -> LatestSnapshotChannel:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()
