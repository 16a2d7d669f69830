"""Integration tests for the batch and history endpoints."""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient


def _orders(*titles_per_order: list[str]) -> dict:
    return {
        "orders": [
            {
                "id": f"o{i}",
                "order_number": f"#{1000 + i}",
                "items": [
                    {"id": f"o{i}-p{j}", "title": title}
                    for j, title in enumerate(titles)
                ],
            }
            for i, titles in enumerate(titles_per_order)
        ]
    }


def _parse_sse(body: str) -> list[tuple[str, dict]]:
    events = []
    for block in body.strip().split("\n\n"):
        lines = dict(line.split(": ", 1) for line in block.splitlines())
        events.append((lines["event"], json.loads(lines["data"])))
    return events


async def _submit_and_wait(client, app, api_v1_prefix, payload) -> str:
    response = await client.post(f"{api_v1_prefix}/batches", json=payload)
    assert response.status_code == 202
    job_id = response.json()["job_id"]
    await app.state.batch_runner.wait_for(job_id)
    return job_id


class TestSubmitBatch:
    @pytest.mark.asyncio
    async def test_submit_returns_job_id_and_runs_job(
        self, client, app, api_v1_prefix
    ):
        job_id = await _submit_and_wait(
            client, app, api_v1_prefix, _orders(["Tee"], ["Wallet"])
        )

        response = await client.get(f"{api_v1_prefix}/batches/{job_id}")

        assert response.status_code == 200
        job = response.json()
        assert job["status"] == "completed"
        assert job["total"] == 2
        assert job["processed"] == 2
        assert job["failed"] == 0
        assert job["progress_percent"] == 100.0
        assert [r["order_id"] for r in job["results"]] == ["o0", "o1"]

    @pytest.mark.asyncio
    async def test_failed_order_is_reported_in_results(
        self, client, app, api_v1_prefix, classifier
    ):
        classifier.codes["Broken"] = None

        job_id = await _submit_and_wait(
            client, app, api_v1_prefix, _orders(["Broken"], ["Tee"])
        )
        job = (await client.get(f"{api_v1_prefix}/batches/{job_id}")).json()

        assert job["status"] == "completed"
        assert job["failed"] == 1
        assert job["results"][0]["status"] == "failed"
        assert job["results"][0]["message"] == "AI Service Error: rate limited"
        assert job["results"][1]["status"] == "success"

    @pytest.mark.asyncio
    async def test_empty_submission(self, client, app, api_v1_prefix):
        job_id = await _submit_and_wait(client, app, api_v1_prefix, {"orders": []})

        job = (await client.get(f"{api_v1_prefix}/batches/{job_id}")).json()

        assert job["status"] == "completed"
        assert job["total"] == 0
        assert job["results"] == []

    @pytest.mark.asyncio
    async def test_custom_name(self, client, app, api_v1_prefix):
        payload = {**_orders(["Tee"]), "name": "Morning import"}

        job_id = await _submit_and_wait(client, app, api_v1_prefix, payload)
        job = (await client.get(f"{api_v1_prefix}/batches/{job_id}")).json()

        assert job["name"] == "Morning import"

    @pytest.mark.asyncio
    async def test_invalid_payload_is_rejected(self, client, api_v1_prefix):
        response = await client.post(
            f"{api_v1_prefix}/batches",
            json={"orders": [{"id": "o1"}]},
        )

        assert response.status_code == 422


class TestQueryBatches:
    @pytest.mark.asyncio
    async def test_list_is_most_recent_first(self, client, app, api_v1_prefix):
        first = await _submit_and_wait(client, app, api_v1_prefix, _orders(["Tee"]))
        second = await _submit_and_wait(client, app, api_v1_prefix, _orders(["Cap"]))

        body = (await client.get(f"{api_v1_prefix}/batches")).json()

        assert body["total"] == 2
        assert [job["id"] for job in body["jobs"]] == [second, first]

    @pytest.mark.asyncio
    async def test_unknown_job_returns_404_with_code(self, client, api_v1_prefix):
        response = await client.get(f"{api_v1_prefix}/batches/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {
            "detail": "Batch job not found: does-not-exist",
            "code": "JOB_NOT_FOUND",
        }

    @pytest.mark.asyncio
    async def test_overview(self, client, app, api_v1_prefix, classifier):
        classifier.codes["Broken"] = None
        await _submit_and_wait(
            client, app, api_v1_prefix, _orders(["Tee"], ["Broken"], ["Cap"], ["Mug"])
        )

        body = (await client.get(f"{api_v1_prefix}/batches/overview")).json()

        assert body["active_jobs"] == []
        assert len(body["past_jobs"]) == 1
        assert body["total_orders_processed"] == 4
        assert body["total_orders_failed"] == 1
        assert body["success_rate"] == 75.0


class TestBatchEvents:
    @pytest.mark.asyncio
    async def test_finished_job_streams_single_completion_event(
        self, client, app, api_v1_prefix
    ):
        job_id = await _submit_and_wait(client, app, api_v1_prefix, _orders(["Tee"]))

        response = await client.get(f"{api_v1_prefix}/batches/{job_id}/events")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        events = _parse_sse(response.text)
        assert [name for name, _ in events] == ["job_completed"]
        assert events[0][1]["id"] == job_id

    @pytest.mark.asyncio
    async def test_running_job_streams_updates_until_completion(
        self, client, app, api_v1_prefix, classifier
    ):
        classifier.gate = asyncio.Event()
        response = await client.post(
            f"{api_v1_prefix}/batches", json=_orders(["Tee"], ["Cap"])
        )
        job_id = response.json()["job_id"]
        await classifier.entered.wait()

        store = app.state.job_store
        stream = asyncio.ensure_future(
            client.get(f"{api_v1_prefix}/batches/{job_id}/events")
        )
        while store.bus.subscriber_count == 0:
            await asyncio.sleep(0)
        classifier.gate.set()

        events = _parse_sse((await asyncio.wait_for(stream, timeout=5)).text)

        names = [name for name, _ in events]
        assert names[0] == "job_updated"
        assert names[-1] == "job_completed"
        assert events[0][1]["status"] == "processing"
        processed = [data["processed"] for _, data in events]
        assert processed == sorted(processed)
        assert events[-1][1]["processed"] == 2

    @pytest.mark.asyncio
    async def test_unknown_job_events_return_404(self, client, api_v1_prefix):
        response = await client.get(f"{api_v1_prefix}/batches/missing/events")

        assert response.status_code == 404
        assert response.json()["code"] == "JOB_NOT_FOUND"


class TestHistory:
    @pytest.mark.asyncio
    async def test_search_history(self, client, app, api_v1_prefix, classifier):
        classifier.codes.update({"Leather Wallet": "4202.31", "Tee": "6109.10"})
        await _submit_and_wait(
            client, app, api_v1_prefix, _orders(["Tee", "Leather Wallet"])
        )

        everything = (await client.get(f"{api_v1_prefix}/history")).json()
        wallets = (
            await client.get(f"{api_v1_prefix}/history", params={"q": "wallet"})
        ).json()

        assert everything["total"] == 2
        assert everything["entries"][0]["product_name"] == "Leather Wallet"
        assert wallets["total"] == 1
        assert wallets["entries"][0]["hs_code"] == "4202.31"

    @pytest.mark.asyncio
    async def test_min_confidence_out_of_range(self, client, api_v1_prefix):
        response = await client.get(
            f"{api_v1_prefix}/history", params={"min_confidence": 101}
        )

        assert response.status_code == 422


class TestAppEndpoints:
    def test_health_and_root(self, app):
        with TestClient(app) as client:
            health = client.get("/health")
            root = client.get("/")

        assert health.status_code == 200
        assert health.json()["status"] == "healthy"
        assert root.json()["endpoints"]["batches"] == "/api/v1/batches"

