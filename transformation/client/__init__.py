"""
Async client for the journal API with a query cache and read retries.
"""

from transformation.client.api_client import (
    ENTRY_ENDPOINTS,
    MUTATION_INVALIDATIONS,
    EntryRef,
    JournalClient,
)
from transformation.client.cache import CacheStats, QueryCache, normalize_key
from transformation.client.retry import RetryConfig, RetryPolicy

__all__ = [
    "JournalClient",
    "EntryRef",
    "ENTRY_ENDPOINTS",
    "MUTATION_INVALIDATIONS",
    "QueryCache",
    "CacheStats",
    "normalize_key",
    "RetryConfig",
    "RetryPolicy",
]
