"""
SQLite record store.

Durable backend: one table per entity kind keyed by a generated id, with an
index on each kind's natural key. Lists are stored as JSON text and booleans
as integers.

Usage:
    from transformation.storage.sqlite import SQLiteRecordStore

    store = SQLiteRecordStore(Path("State/transformation.db"))
    task = store.create(EntityKind.TASK, {"title": "Write", "week_start": "2026-10-12"})
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from threading import Lock, RLock
from typing import Any, Dict, List, Optional, Union

from transformation.errors import StoreError
from transformation.models import EntityKind, EntityType
from transformation.storage.base import RecordStore

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"

SCHEMA = '''
    CREATE TABLE IF NOT EXISTS schema_version (
        version INTEGER PRIMARY KEY,
        applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS tasks (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        description TEXT,
        is_completed INTEGER NOT NULL DEFAULT 0,
        is_active INTEGER NOT NULL DEFAULT 1,
        week_start TEXT NOT NULL,
        created_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS daily_entries (
        id TEXT PRIMARY KEY,
        date TEXT NOT NULL,
        morning_intention TEXT,
        energy_level INTEGER,
        suggested_task_id TEXT,
        ten_minute_activity TEXT,
        activity_completed INTEGER NOT NULL DEFAULT 0,
        evening_reflection TEXT,
        promise_kept TEXT,
        follow_up_response TEXT,
        photos JSON NOT NULL DEFAULT '[]',
        voice_notes JSON NOT NULL DEFAULT '[]',
        created_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS reflections (
        id TEXT PRIMARY KEY,
        prompt_id TEXT NOT NULL,
        prompt_text TEXT NOT NULL,
        response TEXT NOT NULL,
        follow_up_response TEXT,
        date TEXT NOT NULL,
        created_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS weekly_reviews (
        id TEXT PRIMARY KEY,
        week_start TEXT NOT NULL,
        week_end TEXT NOT NULL,
        proud_actions TEXT,
        self_respect_moments TEXT,
        patterns TEXT,
        next_week_cultivate TEXT,
        next_week_support TEXT,
        growth_level INTEGER NOT NULL DEFAULT 1,
        promises_kept INTEGER NOT NULL DEFAULT 0,
        total_promises INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL
    );

    -- Natural-key lookups
    CREATE INDEX IF NOT EXISTS idx_tasks_week_start ON tasks(week_start, is_active);
    CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at);
    CREATE INDEX IF NOT EXISTS idx_daily_entries_date ON daily_entries(date);
    CREATE INDEX IF NOT EXISTS idx_reflections_date ON reflections(date);
    CREATE INDEX IF NOT EXISTS idx_reflections_created_at ON reflections(created_at);
    CREATE INDEX IF NOT EXISTS idx_weekly_reviews_week_start ON weekly_reviews(week_start);
'''


class SQLiteRecordStore(RecordStore):
    """SQLite-backed record store."""

    name = "sqlite"
    SCHEMA_VERSION = 1

    def __init__(self, db_path: Union[Path, str]):
        """
        Initialize the store and create the schema if needed.

        Args:
            db_path: SQLite database file, or ":memory:" for a private in-process database
        """
        self._memory = str(db_path) == MEMORY_DB
        self.db_path = Path(db_path) if not self._memory else None
        self._conn: Optional[sqlite3.Connection] = None
        self._write_lock = Lock()
        self._shared_lock = RLock()

        if self.db_path is not None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    def _connect(self) -> sqlite3.Connection:
        if self._memory:
            conn = sqlite3.connect(MEMORY_DB, check_same_thread=False)
        else:
            conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        if not self._memory:
            conn.execute("PRAGMA journal_mode = WAL")
        return conn

    @contextmanager
    def _get_connection(self):
        """Get database connection with proper handling."""
        if self._memory:
            # A private in-memory database lives only as long as its connection
            with self._shared_lock:
                if self._conn is None:
                    self._conn = self._connect()
                conn = self._conn
                try:
                    yield conn
                    conn.commit()
                except Exception:
                    conn.rollback()
                    raise
            return

        conn = self._connect()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def close(self) -> None:
        """Close the shared connection of an in-memory database."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _init_database(self):
        """Initialize database schema."""
        with self._guard("init"):
            with self._get_connection() as conn:
                conn.executescript(SCHEMA)
                conn.execute(
                    "INSERT OR IGNORE INTO schema_version (version) VALUES (?)",
                    (self.SCHEMA_VERSION,)
                )

    @contextmanager
    def _guard(self, operation: str, kind: Optional[EntityKind] = None):
        """Translate sqlite3 failures into StoreError."""
        try:
            yield
        except sqlite3.Error as e:
            logger.error(
                f"SQLite {operation} failed for {kind.value if kind else 'schema'}: {e}",
                exc_info=True
            )
            raise StoreError(
                f"Failed to {operation} record",
                operation=operation,
                kind=kind.value if kind else None,
                cause=e,
            ) from e

    # Row conversion

    @staticmethod
    def _to_row(entity: EntityType, values: Dict[str, Any]) -> Dict[str, Any]:
        row = {}
        for name, value in values.items():
            if name in entity.json_fields:
                row[name] = json.dumps(value if value is not None else [])
            elif name in entity.bool_fields:
                row[name] = int(bool(value))
            else:
                row[name] = value
        return row

    @staticmethod
    def _from_row(entity: EntityType, row: sqlite3.Row) -> Any:
        values = {}
        for name in entity.field_names:
            value = row[name]
            if name in entity.json_fields:
                value = json.loads(value) if value else []
            elif name in entity.bool_fields:
                value = bool(value)
            values[name] = value
        return entity.model(**values)

    def _select(
        self,
        entity: EntityType,
        conn: sqlite3.Connection,
        where: List[str],
        params: List[Any],
    ) -> List[Any]:
        sql = f"SELECT * FROM {entity.table}"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += f" ORDER BY {entity.order_by} DESC, rowid DESC"
        return [self._from_row(entity, row) for row in conn.execute(sql, params).fetchall()]

    # RecordStore API

    def list(
        self,
        kind: EntityKind,
        filters: Optional[Dict[str, Any]] = None,
        include_inactive: bool = False,
    ) -> List[Any]:
        entity = self._entity(kind)
        filters = filters or {}
        self._check_fields(entity, filters)

        where, params = [], []
        if entity.soft_delete and not include_inactive:
            where.append("is_active = 1")
        for name, value in self._to_row(entity, filters).items():
            where.append(f"{name} = ?")
            params.append(value)

        with self._guard("fetch", entity.kind):
            with self._get_connection() as conn:
                return self._select(entity, conn, where, params)

    def get_by_key(self, kind: EntityKind, key: str) -> Optional[Any]:
        entity = self._entity(kind)
        matches = self.list(entity.kind, {entity.natural_key: key})
        return matches[0] if matches else None

    def get(self, kind: EntityKind, record_id: str) -> Optional[Any]:
        entity = self._entity(kind)
        with self._guard("fetch", entity.kind):
            with self._get_connection() as conn:
                rows = self._select(entity, conn, ["id = ?"], [record_id])
        return rows[0] if rows else None

    def create(self, kind: EntityKind, values: Dict[str, Any]) -> Any:
        entity = self._entity(kind)
        record = entity.model(
            id=self._new_id(),
            created_at=self._now(),
            **self._writable(entity, values)
        )
        row = self._to_row(entity, {name: getattr(record, name) for name in entity.field_names})
        columns = ", ".join(row)
        placeholders = ", ".join("?" for _ in row)

        with self._guard("create", entity.kind), self._write_lock:
            with self._get_connection() as conn:
                conn.execute(
                    f"INSERT INTO {entity.table} ({columns}) VALUES ({placeholders})",
                    list(row.values())
                )
        logger.debug(f"Created {entity.kind.value} {record.id}")
        return record

    def update(self, kind: EntityKind, record_id: str, changes: Dict[str, Any]) -> Optional[Any]:
        entity = self._entity(kind)
        row = self._to_row(entity, self._writable(entity, changes))

        with self._guard("update", entity.kind), self._write_lock:
            with self._get_connection() as conn:
                if row:
                    assignments = ", ".join(f"{name} = ?" for name in row)
                    cursor = conn.execute(
                        f"UPDATE {entity.table} SET {assignments} WHERE id = ?",
                        [*row.values(), record_id]
                    )
                    if cursor.rowcount == 0:
                        return None
                rows = self._select(entity, conn, ["id = ?"], [record_id])
        return rows[0] if rows else None

    def delete(self, kind: EntityKind, record_id: str) -> bool:
        entity = self._entity(kind)
        with self._guard("delete", entity.kind), self._write_lock:
            with self._get_connection() as conn:
                if entity.soft_delete:
                    cursor = conn.execute(
                        f"UPDATE {entity.table} SET is_active = 0 WHERE id = ? AND is_active = 1",
                        (record_id,)
                    )
                else:
                    cursor = conn.execute(
                        f"DELETE FROM {entity.table} WHERE id = ?",
                        (record_id,)
                    )
                return cursor.rowcount > 0

    def list_for_date_range(self, kind: EntityKind, start: str, end: str) -> List[Any]:
        entity = self._entity(kind)
        field_name = self._date_range_field(entity)

        where = [f"{field_name} >= ?", f"{field_name} <= ?"]
        if entity.soft_delete:
            where.append("is_active = 1")

        with self._guard("fetch", entity.kind):
            with self._get_connection() as conn:
                return self._select(entity, conn, where, [start, end])
