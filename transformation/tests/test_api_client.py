# transformation/tests/test_api_client.py
import httpx
import pytest

from transformation.client import EntryRef, JournalClient, RetryConfig
from transformation.errors import ApiError
from transformation.models import EntityKind

NO_DELAY = RetryConfig(max_attempts=3, delay=0)


def _client(app, **kwargs):
    """JournalClient talking to the app in-process."""
    return JournalClient(
        base_url="http://testserver",
        transport=httpx.ASGITransport(app=app),
        retry_config=NO_DELAY,
        **kwargs,
    )


def _mock_client(handler):
    return JournalClient(
        base_url="http://testserver",
        transport=httpx.MockTransport(handler),
        retry_config=NO_DELAY,
    )


@pytest.mark.asyncio
async def test_create_invalidates_cached_list(app, task_payload):
    """A mutation makes the next read re-fetch."""
    async with _client(app) as client:
        assert await client.get_tasks(week_start="2026-10-12") == []

        created = await client.create_task(task_payload)

        tasks = await client.get_tasks(week_start="2026-10-12")
        assert [t["id"] for t in tasks] == [created["id"]]


@pytest.mark.asyncio
async def test_reads_are_cached(app):
    async with _client(app) as client:
        await client.get_all_tasks()
        await client.get_all_tasks()
        assert client.cache.stats.hits == 1
        assert client.cache.stats.misses == 1


@pytest.mark.asyncio
async def test_task_completion_round_trip(app, task_payload):
    async with _client(app) as client:
        task = await client.create_task(task_payload)
        assert (await client.get_all_tasks())[0]["isCompleted"] is False

        await client.set_task_completed(task["id"], True)
        assert (await client.get_all_tasks())[0]["isCompleted"] is True

        await client.delete_task(task["id"])
        assert await client.get_all_tasks() == []


@pytest.mark.asyncio
async def test_save_daily_entry_creates_then_updates(app):
    async with _client(app) as client:
        first = await client.save_daily_entry("2026-10-14", {"morningIntention": "Walk"})
        second = await client.save_daily_entry("2026-10-14", {"promiseKept": "yes"})

        assert second["id"] == first["id"]
        assert second["morningIntention"] == "Walk"
        assert second["promiseKept"] == "yes"
        assert len(await client.get_all_daily_entries()) == 1


@pytest.mark.asyncio
async def test_daily_mutation_refreshes_insights(app):
    async with _client(app) as client:
        assert (await client.get_streak(today="2026-10-14"))["consecutiveDays"] == 0

        await client.save_daily_entry("2026-10-14", {"promiseKept": "yes"})

        assert (await client.get_streak(today="2026-10-14"))["consecutiveDays"] == 1


@pytest.mark.asyncio
async def test_entry_refs_dispatch_by_kind(app, daily_payload, reflection_payload, review_payload):
    """Hyphenated UUIDs reach the right endpoint through their tagged kind."""
    async with _client(app) as client:
        daily = await client.create_daily_entry(daily_payload)
        reflection = await client.create_reflection(reflection_payload)
        review = await client.create_weekly_review(review_payload)

        refs = [
            EntryRef.for_record(EntityKind.DAILY, daily),
            EntryRef.for_record(EntityKind.REFLECTION, reflection),
            EntryRef.for_record(EntityKind.REVIEW, review),
        ]
        assert all("-" in ref.id for ref in refs)

        updated = await client.update_entry(refs[0], {"eveningReflection": "Good day"})
        assert updated["eveningReflection"] == "Good day"

        for ref in refs:
            assert await client.delete_entry(ref) == {"success": True}

        assert await client.get_daily_entry("2026-10-14") is None
        assert await client.get_all_reflections() == []
        assert await client.get_weekly_review("2026-10-12") is None


@pytest.mark.asyncio
async def test_not_found_raises_api_error(app):
    async with _client(app) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.update_entry(EntryRef(EntityKind.TASK, "missing"), {"title": "x"})

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Task not found"
    assert exc_info.value.retryable is False


@pytest.mark.asyncio
async def test_reads_retry_server_errors():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        if len(calls) < 3:
            return httpx.Response(500, json={"message": "Failed to fetch all tasks"})
        return httpx.Response(200, json=[])

    async with _mock_client(handler) as client:
        assert await client.get_all_tasks() == []
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_reads_give_up_after_max_attempts():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503, text="unavailable")

    async with _mock_client(handler) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.get_all_reflections()
    assert exc_info.value.status_code == 503
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_reads_retry_transport_errors():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    async with _mock_client(handler) as client:
        with pytest.raises(httpx.ConnectError):
            await client.get_all_tasks()
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_client_errors_are_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(400, json={"message": "Invalid request"})

    async with _mock_client(handler) as client:
        with pytest.raises(ApiError):
            await client.get_streak(today="nope")
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_writes_are_not_retried():
    calls = []

    def handler(request):
        calls.append(request.method)
        return httpx.Response(500, json={"message": "Failed to create task"})

    async with _mock_client(handler) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.create_task({"title": "Once", "weekStart": "2026-10-12"})
    assert calls == ["POST"]
    assert exc_info.value.message == "Failed to create task"


@pytest.mark.asyncio
async def test_failed_write_keeps_cache():
    responses = iter([
        httpx.Response(200, json=[{"id": "t1"}]),
        httpx.Response(500, json={"message": "Failed to create task"}),
    ])

    async with _mock_client(lambda request: next(responses)) as client:
        await client.get_all_tasks()
        with pytest.raises(ApiError):
            await client.create_task({"title": "x", "weekStart": "2026-10-12"})
        assert await client.get_all_tasks() == [{"id": "t1"}]
