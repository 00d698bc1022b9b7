"""
Client Query Cache.

Caches API reads by logical query identity. A key is the tuple of a
request's path segments followed by its sorted non-null query parameters, so
``invalidate("/api/daily")`` drops ``/api/daily/2026-10-12`` but leaves
``/api/daily-all`` alone. Entries never expire on their own; mutations
invalidate the prefixes whose data they could have changed.

Concurrent fetches of the same key share a single in-flight request.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)

QueryKey = Tuple[Any, ...]


def normalize_key(path: str, params: Optional[Mapping[str, Any]] = None) -> QueryKey:
    """
    Build the cache key for a request.

    Args:
        path: Request path, e.g. "/api/tasks"
        params: Query parameters; None values are dropped

    Returns:
        Tuple of path segments followed by (name, value) pairs sorted by name
    """
    segments = tuple(part for part in path.split("/") if part)
    pairs = tuple(
        (name, str(value))
        for name, value in sorted((params or {}).items())
        if value is not None
    )
    return segments + pairs


@dataclass
class CacheEntry:
    """
    A single cache entry.

    ``fetched_at`` is None until the first fetch completes; ``in_flight``
    holds the shared request while one is running.
    """

    key: QueryKey
    data: Any = None
    fetched_at: Optional[datetime] = None
    in_flight: Optional[asyncio.Future] = None

    @property
    def has_data(self) -> bool:
        return self.fetched_at is not None


@dataclass
class CacheStats:
    """Cache statistics for monitoring."""

    hits: int = 0
    misses: int = 0
    deduplicated: int = 0
    """Fetches that joined a request already in flight"""
    invalidations: int = 0
    """Entries dropped by ``invalidate``"""

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "deduplicated": self.deduplicated,
            "invalidations": self.invalidations,
            "hit_rate": self.hit_rate,
        }


class QueryCache:
    """
    Read-through cache for one API client.

    Not shared between event loops; pass one instance to each client that
    should see the same cached data.
    """

    def __init__(self):
        self._entries: Dict[QueryKey, CacheEntry] = {}
        self._stats = CacheStats()

    async def fetch(self, key: QueryKey, fetcher: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return cached data for ``key``, fetching it on a miss.

        Args:
            key: Key from ``normalize_key``
            fetcher: Zero-argument coroutine function performing the request

        Returns:
            The cached or freshly fetched data

        Raises:
            Exception: Whatever the fetcher raised; failures are not cached
        """
        entry = self._entries.get(key)

        if entry is not None and entry.has_data:
            self._stats.hits += 1
            logger.debug(f"Cache hit: {key}")
            return entry.data

        if entry is not None and entry.in_flight is not None:
            self._stats.deduplicated += 1
            logger.debug(f"Joining in-flight request: {key}")
            return await asyncio.shield(entry.in_flight)

        self._stats.misses += 1
        logger.debug(f"Cache miss: {key}")

        entry = CacheEntry(key=key)
        self._entries[key] = entry
        entry.in_flight = asyncio.ensure_future(fetcher())
        try:
            data = await asyncio.shield(entry.in_flight)
        except BaseException:
            entry.in_flight = None
            if self._entries.get(key) is entry and not entry.has_data:
                del self._entries[key]
            raise

        entry.in_flight = None
        # Invalidated while in flight: hand the result to waiters but don't keep it
        if self._entries.get(key) is entry:
            entry.data = data
            entry.fetched_at = datetime.now()
        return data

    def get(self, key: QueryKey) -> Optional[Any]:
        """Cached data for ``key`` without fetching, or None."""
        entry = self._entries.get(key)
        if entry is None or not entry.has_data:
            return None
        return entry.data

    def invalidate(self, prefix: Union[str, QueryKey]) -> int:
        """
        Drop every entry whose key starts with ``prefix``.

        Args:
            prefix: A path such as "/api/tasks" or a key tuple; compared
                element by element, not as a string prefix

        Returns:
            Number of entries dropped
        """
        prefix_key = normalize_key(prefix) if isinstance(prefix, str) else tuple(prefix)
        matching: List[QueryKey] = [
            key for key in self._entries if key[:len(prefix_key)] == prefix_key
        ]
        for key in matching:
            del self._entries[key]

        self._stats.invalidations += len(matching)
        if matching:
            logger.debug(f"Invalidated {len(matching)} entries under {prefix_key}")
        return len(matching)

    def clear(self) -> None:
        """Drop all entries."""
        count = len(self._entries)
        self._entries.clear()
        self._stats.invalidations += count
        logger.debug(f"Cleared {count} cache entries")

    def keys(self) -> List[QueryKey]:
        return list(self._entries)

    @property
    def stats(self) -> CacheStats:
        return self._stats
