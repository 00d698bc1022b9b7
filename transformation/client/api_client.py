"""
Journal API Client.

Async HTTP client for the TenMinuteTransformation REST API. Reads go
through a QueryCache and are retried on server and transport errors;
writes are sent once and, on success, invalidate the cached queries they
could have changed.

Usage:
    async with JournalClient("http://localhost:5000") as client:
        tasks = await client.get_tasks(week_start="2026-10-12")
        await client.set_task_completed(tasks[0]["id"], True)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httpx

from transformation.client.cache import QueryCache, normalize_key
from transformation.client.retry import RetryConfig, RetryPolicy
from transformation.errors import ApiError
from transformation.models import EntityKind

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"

# Cached query prefixes each kind of mutation can make stale
MUTATION_INVALIDATIONS: Dict[EntityKind, Tuple[str, ...]] = {
    EntityKind.TASK: ("/api/tasks", "/api/tasks-all"),
    EntityKind.DAILY: ("/api/daily", "/api/daily-all", "/api/daily-week", "/api/insights"),
    EntityKind.REFLECTION: ("/api/reflections", "/api/reflections-all"),
    EntityKind.REVIEW: ("/api/weekly-review", "/api/weekly-reviews-all"),
}

# (update path, delete path) per kind
ENTRY_ENDPOINTS: Dict[EntityKind, Tuple[str, str]] = {
    EntityKind.TASK: ("/api/tasks/{id}", "/api/tasks/{id}"),
    EntityKind.DAILY: ("/api/daily/{id}", "/api/daily-entries/{id}"),
    EntityKind.REFLECTION: ("/api/reflections/{id}", "/api/reflections/{id}"),
    EntityKind.REVIEW: ("/api/weekly-review/{id}", "/api/weekly-review/{id}"),
}


@dataclass(frozen=True)
class EntryRef:
    """
    A record id tagged with its kind.

    Views that mix record types (a timeline of entries, reflections and
    reviews) carry one of these per item so edits and deletes reach the
    right endpoint whatever the id looks like.
    """
    kind: EntityKind
    id: str
    payload: Optional[Dict[str, Any]] = None

    @classmethod
    def for_record(cls, kind: EntityKind, record: Dict[str, Any]) -> "EntryRef":
        return cls(kind=EntityKind(kind), id=record["id"], payload=record)


class JournalClient:
    """
    Client for the journal REST API.

    Records are returned as the API's camelCase JSON dictionaries.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        cache: Optional[QueryCache] = None,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize the client.

        Args:
            base_url: API server root
            cache: Query cache; a private one is created when omitted
            retry_config: Read retry settings
            transport: httpx transport override (tests use ASGITransport or MockTransport)
            timeout: Request timeout in seconds
        """
        self.base_url = base_url
        self.cache = cache or QueryCache()
        self.retry = RetryPolicy(retry_config)
        self._transport = transport
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                transport=self._transport,
                timeout=self._timeout,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "JournalClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # Transport

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        client = await self._get_client()
        if params:
            params = {name: value for name, value in params.items() if value is not None}
        response = await client.request(method, path, params=params or None, json=body)

        if response.status_code >= 400:
            raise ApiError(response.status_code, self._error_message(response), path=path)
        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
        return response.reason_phrase

    async def _read(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        key = normalize_key(path, params)
        return await self.cache.fetch(
            key,
            lambda: self.retry.execute_async(self._request, "GET", path, params),
        )

    async def _write(
        self,
        kind: EntityKind,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        result = await self._request(method, path, body=body)
        self.invalidate(kind)
        return result

    def invalidate(self, kind: EntityKind) -> None:
        """Drop cached queries affected by a mutation of ``kind``."""
        for prefix in MUTATION_INVALIDATIONS[EntityKind(kind)]:
            self.cache.invalidate(prefix)

    # Tasks

    async def get_tasks(self, week_start: Optional[str] = None) -> List[Dict[str, Any]]:
        return await self._read("/api/tasks", {"weekStart": week_start})

    async def get_all_tasks(self) -> List[Dict[str, Any]]:
        return await self._read("/api/tasks-all")

    async def create_task(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return await self._write(EntityKind.TASK, "POST", "/api/tasks", values)

    async def update_task(self, task_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return await self._write(EntityKind.TASK, "PUT", f"/api/tasks/{task_id}", changes)

    async def delete_task(self, task_id: str) -> Dict[str, Any]:
        return await self._write(EntityKind.TASK, "DELETE", f"/api/tasks/{task_id}")

    async def set_task_completed(self, task_id: str, completed: bool) -> Dict[str, Any]:
        return await self._write(
            EntityKind.TASK, "PATCH", f"/api/tasks/{task_id}/complete", {"completed": completed}
        )

    # Daily entries

    async def get_all_daily_entries(self) -> List[Dict[str, Any]]:
        return await self._read("/api/daily-all")

    async def get_daily_entry(self, date: str) -> Optional[Dict[str, Any]]:
        return await self._read(f"/api/daily/{date}")

    async def get_week_entries(self, week_start: str, week_end: str) -> List[Dict[str, Any]]:
        return await self._read(f"/api/daily-week/{week_start}/{week_end}")

    async def create_daily_entry(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return await self._write(EntityKind.DAILY, "POST", "/api/daily", values)

    async def update_daily_entry(self, entry_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return await self._write(EntityKind.DAILY, "PUT", f"/api/daily/{entry_id}", changes)

    async def delete_daily_entry(self, entry_id: str) -> Dict[str, Any]:
        return await self._write(EntityKind.DAILY, "DELETE", f"/api/daily-entries/{entry_id}")

    async def save_daily_entry(self, date: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create or update the entry for ``date``.

        Args:
            date: Entry date (YYYY-MM-DD)
            fields: camelCase fields to set

        Returns:
            The stored entry
        """
        existing = await self.get_daily_entry(date)
        if existing:
            return await self.update_daily_entry(existing["id"], fields)
        return await self.create_daily_entry({**fields, "date": date})

    # Reflections

    async def get_reflections(self, date: Optional[str] = None) -> List[Dict[str, Any]]:
        path = f"/api/reflections/{date}" if date else "/api/reflections"
        return await self._read(path)

    async def get_all_reflections(self) -> List[Dict[str, Any]]:
        return await self._read("/api/reflections-all")

    async def create_reflection(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return await self._write(EntityKind.REFLECTION, "POST", "/api/reflections", values)

    async def update_reflection(self, reflection_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return await self._write(
            EntityKind.REFLECTION, "PUT", f"/api/reflections/{reflection_id}", changes
        )

    async def delete_reflection(self, reflection_id: str) -> Dict[str, Any]:
        return await self._write(EntityKind.REFLECTION, "DELETE", f"/api/reflections/{reflection_id}")

    # Weekly reviews

    async def get_weekly_review(self, week_start: str) -> Optional[Dict[str, Any]]:
        return await self._read(f"/api/weekly-review/{week_start}")

    async def get_all_weekly_reviews(self) -> List[Dict[str, Any]]:
        return await self._read("/api/weekly-reviews-all")

    async def create_weekly_review(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return await self._write(EntityKind.REVIEW, "POST", "/api/weekly-review", values)

    async def update_weekly_review(self, review_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return await self._write(EntityKind.REVIEW, "PUT", f"/api/weekly-review/{review_id}", changes)

    async def delete_weekly_review(self, review_id: str) -> Dict[str, Any]:
        return await self._write(EntityKind.REVIEW, "DELETE", f"/api/weekly-review/{review_id}")

    # Mixed-kind dispatch

    async def update_entry(self, ref: EntryRef, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Update the record ``ref`` points at through its kind's endpoint."""
        path = ENTRY_ENDPOINTS[ref.kind][0].format(id=ref.id)
        return await self._write(ref.kind, "PUT", path, changes)

    async def delete_entry(self, ref: EntryRef) -> Dict[str, Any]:
        """Delete the record ``ref`` points at through its kind's endpoint."""
        path = ENTRY_ENDPOINTS[ref.kind][1].format(id=ref.id)
        return await self._write(ref.kind, "DELETE", path)

    # Insights

    async def get_reflection_prompts(self) -> List[Dict[str, Any]]:
        return await self._read("/api/reflection-prompts")

    async def get_streak(self, today: Optional[str] = None) -> Dict[str, Any]:
        return await self._read("/api/insights/streak", {"today": today})

    async def get_week_stats(self, week_start: str, week_end: str) -> Dict[str, Any]:
        return await self._read(f"/api/insights/week/{week_start}/{week_end}")

    async def suggest_activity(
        self,
        week_start: Optional[str] = None,
        energy_level: Optional[int] = None,
        source: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Fresh suggestion on every call; not cached."""
        params = {"weekStart": week_start, "energyLevel": energy_level, "source": source}
        return await self.retry.execute_async(
            self._request, "GET", "/api/suggestions/activity", params
        )
