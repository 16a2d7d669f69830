"""Unit tests for BatchJobStore."""

from unittest.mock import Mock

import pytest

from kargo.application.services import BatchJobStore, JobSubscriptionBus
from kargo.domain.batch import (
    BatchJobNotFoundError,
    InvalidJobTransitionError,
    JobStatus,
)


@pytest.fixture
def store() -> BatchJobStore:
    return BatchJobStore()


class TestCreateJob:
    def test_new_job_is_queued_with_zero_counters(self, store):
        job = store.create_job(total_units=3)

        assert job.status == JobStatus.QUEUED
        assert job.total == 3
        assert job.processed == 0
        assert job.failed == 0
        assert job.results == ()

    def test_jobs_are_listed_most_recent_first(self, store):
        first = store.create_job(total_units=1)
        second = store.create_job(total_units=2)

        assert [job.id for job in store.list_jobs()] == [second.id, first.id]

    def test_create_publishes_snapshot(self):
        bus = JobSubscriptionBus()
        store = BatchJobStore(bus=bus)
        callback = Mock()
        bus.subscribe(callback)

        job = store.create_job(total_units=1)

        callback.assert_called_once()
        (snapshot,) = callback.call_args.args
        assert snapshot == [job]


class TestUpdateJob:
    def test_update_merges_fields(self, store):
        job = store.create_job(total_units=2)

        updated = store.update_job(job.id, status=JobStatus.PROCESSING, processed=1)

        assert updated is not None
        assert updated.status == JobStatus.PROCESSING
        assert updated.processed == 1
        assert updated.total == 2
        assert updated.name == job.name
        assert store.get_job(job.id) == updated

    def test_update_replaces_instead_of_mutating(self, store):
        job = store.create_job(total_units=2)

        store.update_job(job.id, processed=1)

        assert job.processed == 0

    def test_unknown_job_is_a_silent_no_op(self, store):
        store.create_job(total_units=1)
        callback = Mock()
        store.subscribe(callback)
        callback.reset_mock()

        assert store.update_job("missing", processed=1) is None
        callback.assert_not_called()

    def test_every_update_publishes_fresh_snapshot(self, store):
        job = store.create_job(total_units=2)
        snapshots = []
        store.subscribe(snapshots.append)

        store.update_job(job.id, status=JobStatus.PROCESSING)
        store.update_job(job.id, processed=1)

        assert len(snapshots) == 3
        assert [s[0].processed for s in snapshots] == [0, 0, 1]
        assert snapshots[1] is not snapshots[2]

    def test_status_cannot_move_backwards(self, store):
        job = store.create_job(total_units=1)
        store.update_job(job.id, status=JobStatus.COMPLETED)

        with pytest.raises(InvalidJobTransitionError):
            store.update_job(job.id, status=JobStatus.PROCESSING)

        assert store.get_job(job.id).status == JobStatus.COMPLETED

    def test_processed_cannot_decrease(self, store):
        job = store.create_job(total_units=2)
        store.update_job(job.id, processed=2)

        with pytest.raises(InvalidJobTransitionError):
            store.update_job(job.id, processed=1)

    def test_unknown_field_is_rejected(self, store):
        job = store.create_job(total_units=1)

        with pytest.raises(TypeError):
            store.update_job(job.id, bogus=True)


class TestQueries:
    def test_list_jobs_returns_a_copy(self, store):
        store.create_job(total_units=1)

        snapshot = store.list_jobs()
        snapshot.clear()

        assert len(store.list_jobs()) == 1

    def test_get_job_raises_for_unknown_id(self, store):
        with pytest.raises(BatchJobNotFoundError):
            store.get_job("missing")

    def test_find_job_returns_none_for_unknown_id(self, store):
        assert store.find_job("missing") is None


class TestSubscribe:
    def test_subscribe_replays_current_list(self, store):
        job = store.create_job(total_units=1)
        received = []

        store.subscribe(received.append)

        assert received == [[job]]

    def test_unsubscribe_stops_notifications(self, store):
        received = []
        unsubscribe = store.subscribe(received.append)

        unsubscribe()
        store.create_job(total_units=1)

        assert received == [[]]


class TestRetention:
    def test_oldest_finished_jobs_are_evicted(self):
        store = BatchJobStore(max_retained_jobs=2)
        oldest = store.create_job(total_units=0)
        store.update_job(oldest.id, status=JobStatus.COMPLETED)
        middle = store.create_job(total_units=0)
        store.update_job(middle.id, status=JobStatus.COMPLETED)

        newest = store.create_job(total_units=0)

        assert [job.id for job in store.list_jobs()] == [newest.id, middle.id]

    def test_active_jobs_are_never_evicted(self):
        store = BatchJobStore(max_retained_jobs=1)
        active = store.create_job(total_units=1)
        store.update_job(active.id, status=JobStatus.PROCESSING)

        newest = store.create_job(total_units=1)

        assert {job.id for job in store.list_jobs()} == {active.id, newest.id}

    def test_zero_keeps_every_job(self):
        store = BatchJobStore(max_retained_jobs=0)
        for _ in range(5):
            job = store.create_job(total_units=0)
            store.update_job(job.id, status=JobStatus.COMPLETED)

        assert len(store.list_jobs()) == 5
