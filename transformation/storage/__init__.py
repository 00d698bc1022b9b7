"""
Record Stores.

Two interchangeable implementations of ``RecordStore``: an in-memory store
for tests and development and a SQLite store for durable use. The backend is
chosen by the ``StorageConfig`` passed at startup.
"""

import logging

from transformation.config import StorageConfig
from transformation.errors import ConfigurationError
from transformation.storage.base import RecordStore
from transformation.storage.memory import MemoryRecordStore
from transformation.storage.sqlite import SQLiteRecordStore

logger = logging.getLogger(__name__)


def create_store(config: StorageConfig) -> RecordStore:
    """
    Build the record store selected by ``config``.

    Args:
        config: Storage configuration

    Returns:
        A ready-to-use record store

    Raises:
        ConfigurationError: If the backend name is unknown
    """
    if config.backend == "memory":
        logger.info("Using in-memory record store")
        return MemoryRecordStore()
    if config.backend == "sqlite":
        logger.info(f"Using SQLite record store at {config.db_path}")
        return SQLiteRecordStore(config.db_path)
    raise ConfigurationError(f"Unknown storage backend '{config.backend}'")


__all__ = [
    "RecordStore",
    "MemoryRecordStore",
    "SQLiteRecordStore",
    "create_store",
]
