"""
Record Store Interface.

Defines the contract both store backends implement. Every operation is
parameterised by an ``EntityKind``; the backend looks up the rest (table,
natural key, soft-delete behaviour) in ``transformation.models``.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from transformation.errors import ValidationError
from transformation.models import EntityKind, EntityType, entity_type


class RecordStore(ABC):
    """
    Abstract base class for record stores.

    Reads of tasks exclude inactive (soft-deleted) tasks unless
    ``include_inactive`` is set. ``get`` is addressed by id and returns the
    record whatever its active flag.
    """

    name: str = "base"

    @abstractmethod
    def list(
        self,
        kind: EntityKind,
        filters: Optional[Dict[str, Any]] = None,
        include_inactive: bool = False,
    ) -> List[Any]:
        """
        List records, newest first.

        Args:
            kind: Record type
            filters: Field name -> value equality filters (snake_case)
            include_inactive: Include soft-deleted tasks

        Returns:
            Matching records ordered by the kind's ``order_by`` field, descending
        """
        pass

    @abstractmethod
    def get_by_key(self, kind: EntityKind, key: str) -> Optional[Any]:
        """
        Fetch one record by its natural key (daily date, review week start...).

        When several records share the key the most recently created one wins.

        Returns:
            The record, or None if no record has that key
        """
        pass

    @abstractmethod
    def get(self, kind: EntityKind, record_id: str) -> Optional[Any]:
        """Fetch a record by id, or None."""
        pass

    @abstractmethod
    def create(self, kind: EntityKind, values: Dict[str, Any]) -> Any:
        """
        Insert a record. The store assigns ``id`` and ``created_at``.

        Args:
            kind: Record type
            values: Validated snake_case field values

        Returns:
            The stored record
        """
        pass

    @abstractmethod
    def update(self, kind: EntityKind, record_id: str, changes: Dict[str, Any]) -> Optional[Any]:
        """
        Merge ``changes`` over the stored record.

        ``id`` and ``created_at`` are never changed.

        Returns:
            The updated record, or None if the id is unknown
        """
        pass

    @abstractmethod
    def delete(self, kind: EntityKind, record_id: str) -> bool:
        """
        Delete a record (soft for tasks, hard otherwise).

        Returns:
            True if a record was deleted, False if the id is unknown or the
            task was already inactive
        """
        pass

    @abstractmethod
    def list_for_date_range(self, kind: EntityKind, start: str, end: str) -> List[Any]:
        """
        Records whose date field lies in ``[start, end]``.

        ISO ``YYYY-MM-DD`` strings compare correctly as plain strings.
        An empty or inverted range returns an empty list.
        """
        pass

    def close(self) -> None:
        """Release backend resources."""

    # Helpers shared by backends

    @staticmethod
    def _entity(kind: EntityKind) -> EntityType:
        return entity_type(kind)

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def _now() -> str:
        return datetime.now().isoformat(timespec="microseconds")

    @staticmethod
    def _check_fields(entity: EntityType, names) -> None:
        unknown = [name for name in names if name not in entity.field_names]
        if unknown:
            raise ValidationError(
                f"Unknown {entity.label.lower()} fields: {', '.join(sorted(unknown))}"
            )

    @staticmethod
    def _writable(entity: EntityType, changes: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in changes.items() if k in entity.mutable_fields}

    @staticmethod
    def _date_range_field(entity: EntityType) -> str:
        if entity.date_field is None:
            raise ValidationError(f"{entity.label} records have no date field")
        return entity.date_field
