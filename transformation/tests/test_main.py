# transformation/tests/test_main.py
import asyncio
import time

import httpx
import pytest


def test_health_returns_plain_ok(client):
    """Test GET /health is a plain-text liveness check."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.text == "OK"
    assert response.headers["content-type"].startswith("text/plain")


def test_root_endpoint(client):
    """Test GET / returns API metadata."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "TenMinuteTransformation API"
    assert data["status"] == "operational"
    assert data["storage"] == "memory"
    assert "version" in data


def test_unknown_route_returns_message(client):
    """Test unknown paths use the {message} error shape."""
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert "message" in response.json()


def test_malformed_json_is_bad_request(client):
    """Test a body that is not JSON is a 400, not a 422."""
    response = client.post(
        "/api/tasks",
        content="{not json",
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"message": "Invalid request"}


def test_store_failure_is_generic_500(client, store, monkeypatch):
    """Test store errors are logged and reported without detail."""
    from transformation.errors import StoreError

    def broken_list(*args, **kwargs):
        raise StoreError("disk I/O error at /secret/path", operation="fetch")

    monkeypatch.setattr(store, "list", broken_list)

    response = client.get("/api/tasks-all")
    assert response.status_code == 500
    assert response.json() == {"message": "Failed to fetch all tasks"}


def test_unexpected_error_is_generic_500(client, store, monkeypatch):
    """Test arbitrary exceptions in handlers never leak."""
    def boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(store, "create", boom)

    response = client.post("/api/daily", json={"date": "2026-10-14"})
    assert response.status_code == 500
    assert response.json() == {"message": "Failed to create daily entry"}


@pytest.mark.asyncio
async def test_slow_store_call_does_not_block_health(app, store, monkeypatch):
    """Store calls run off the event loop, so /health answers during a slow read."""
    def slow_list(*args, **kwargs):
        time.sleep(0.6)
        return []

    monkeypatch.setattr(store, "list", slow_list)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:

        async def timed_health():
            await asyncio.sleep(0.05)
            started = time.monotonic()
            response = await http.get("/health")
            return response, time.monotonic() - started

        slow, (health, elapsed) = await asyncio.gather(http.get("/api/tasks-all"), timed_health())

    assert slow.status_code == 200
    assert health.text == "OK"
    assert elapsed < 0.3
