"""
In-memory record store.

Process-local dictionaries, one per entity kind. Used for tests and local
development; nothing survives a restart.
"""

import copy
import logging
from itertools import count
from threading import RLock
from typing import Any, Dict, List, Optional

from transformation.models import ENTITY_TYPES, EntityKind
from transformation.storage.base import RecordStore

logger = logging.getLogger(__name__)


class MemoryRecordStore(RecordStore):
    """Dictionary-backed store. One lock guards every read and write."""

    name = "memory"

    def __init__(self):
        self._records: Dict[EntityKind, Dict[str, Any]] = {kind: {} for kind in ENTITY_TYPES}
        # Insertion sequence breaks created_at ties deterministically
        self._sequence: Dict[str, int] = {}
        self._counter = count()
        self._lock = RLock()

    def _sorted(self, kind: EntityKind, records) -> List[Any]:
        entity = self._entity(kind)
        return sorted(
            records,
            key=lambda r: (getattr(r, entity.order_by) or "", self._sequence[r.id]),
            reverse=True,
        )

    def list(
        self,
        kind: EntityKind,
        filters: Optional[Dict[str, Any]] = None,
        include_inactive: bool = False,
    ) -> List[Any]:
        entity = self._entity(kind)
        filters = filters or {}
        self._check_fields(entity, filters)
        with self._lock:
            records = list(self._records[entity.kind].values())
            if entity.soft_delete and not include_inactive:
                records = [r for r in records if r.is_active]
            for name, value in filters.items():
                records = [r for r in records if getattr(r, name) == value]
            return [copy.deepcopy(r) for r in self._sorted(entity.kind, records)]

    def get_by_key(self, kind: EntityKind, key: str) -> Optional[Any]:
        entity = self._entity(kind)
        matches = self.list(entity.kind, {entity.natural_key: key})
        return matches[0] if matches else None

    def get(self, kind: EntityKind, record_id: str) -> Optional[Any]:
        entity = self._entity(kind)
        with self._lock:
            record = self._records[entity.kind].get(record_id)
            return copy.deepcopy(record) if record is not None else None

    def create(self, kind: EntityKind, values: Dict[str, Any]) -> Any:
        entity = self._entity(kind)
        values = self._writable(entity, values)
        with self._lock:
            record = entity.model(id=self._new_id(), created_at=self._now(), **copy.deepcopy(values))
            self._records[entity.kind][record.id] = record
            self._sequence[record.id] = next(self._counter)
        logger.debug(f"Created {entity.kind.value} {record.id}")
        return copy.deepcopy(record)

    def update(self, kind: EntityKind, record_id: str, changes: Dict[str, Any]) -> Optional[Any]:
        entity = self._entity(kind)
        changes = self._writable(entity, changes)
        with self._lock:
            record = self._records[entity.kind].get(record_id)
            if record is None:
                return None
            for name, value in copy.deepcopy(changes).items():
                setattr(record, name, value)
            return copy.deepcopy(record)

    def delete(self, kind: EntityKind, record_id: str) -> bool:
        entity = self._entity(kind)
        with self._lock:
            records = self._records[entity.kind]
            record = records.get(record_id)
            if record is None:
                return False
            if entity.soft_delete:
                if not record.is_active:
                    return False
                record.is_active = False
                return True
            del records[record_id]
            self._sequence.pop(record_id, None)
            return True

    def list_for_date_range(self, kind: EntityKind, start: str, end: str) -> List[Any]:
        entity = self._entity(kind)
        field_name = self._date_range_field(entity)
        return [
            r for r in self.list(entity.kind)
            if start <= (getattr(r, field_name) or "") <= end
        ]
