"""
Data Models.

The four journal record types and the metadata the record stores need to
persist them generically. Attributes are snake_case in Python and camelCase
on the wire (``to_dict`` / ``from_dict``).
"""

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Type

from pydantic.alias_generators import to_camel, to_snake


class EntityKind(str, Enum):
    """Record types owned by the store."""

    TASK = "task"
    DAILY = "daily"
    REFLECTION = "reflection"
    REVIEW = "review"


class PromiseKept(str, Enum):
    """User-reported outcome of the day's self-commitment."""

    YES = "yes"
    PARTIAL = "partial"
    NO = "no"


class _Record:
    """Wire conversion shared by all record dataclasses."""

    def to_dict(self) -> Dict[str, Any]:
        return {to_camel(key): value for key, value in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Build a record from a camelCase (or snake_case) mapping, ignoring unknown keys."""
        names = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            name = to_snake(key)
            if name in names:
                values[name] = value
        return cls(**values)


@dataclass
class Task(_Record):
    """A weekly goal. Deleting a task only clears ``is_active``."""
    id: str
    title: str
    week_start: str
    description: Optional[str] = None
    is_completed: bool = False
    is_active: bool = True
    created_at: Optional[str] = None


@dataclass
class DailyEntry(_Record):
    """One day's intention, activity and reflection."""
    id: str
    date: str
    morning_intention: Optional[str] = None
    energy_level: Optional[int] = None
    suggested_task_id: Optional[str] = None  # lookup key only, may dangle
    ten_minute_activity: Optional[str] = None
    activity_completed: bool = False
    evening_reflection: Optional[str] = None
    promise_kept: Optional[str] = None  # yes, partial, no
    follow_up_response: Optional[str] = None
    photos: List[str] = field(default_factory=list)
    voice_notes: List[str] = field(default_factory=list)
    created_at: Optional[str] = None


@dataclass
class Reflection(_Record):
    """An answer to one of the catalog prompts."""
    id: str
    prompt_id: str
    prompt_text: str
    response: str
    date: str
    follow_up_response: Optional[str] = None
    created_at: Optional[str] = None


@dataclass
class WeeklyReview(_Record):
    """End-of-week review with the week's promise tally."""
    id: str
    week_start: str
    week_end: str
    proud_actions: Optional[str] = None
    self_respect_moments: Optional[str] = None
    patterns: Optional[str] = None
    next_week_cultivate: Optional[str] = None
    next_week_support: Optional[str] = None
    growth_level: int = 1
    promises_kept: int = 0
    total_promises: int = 0
    created_at: Optional[str] = None


@dataclass(frozen=True)
class EntityType:
    """
    Storage metadata for one record type.

    Attributes:
        kind: Entity kind
        model: Record dataclass
        table: Table / collection name
        label: Human-readable name used in response messages
        natural_key: Field used by ``get_by_key``
        order_by: Field sorted descending by "list all" reads
        soft_delete: Whether delete flips ``is_active`` instead of removing
        date_field: Field compared by ``list_for_date_range``
        json_fields: List-valued fields (stored as JSON text in SQL)
        bool_fields: Boolean fields (stored as integers in SQL)
    """
    kind: EntityKind
    model: Type[_Record]
    table: str
    label: str
    natural_key: str
    order_by: str = "created_at"
    soft_delete: bool = False
    date_field: Optional[str] = None
    json_fields: tuple = ()
    bool_fields: tuple = ()

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in fields(self.model)]

    @property
    def mutable_fields(self) -> List[str]:
        """Fields a client may set; ``id`` and ``created_at`` are server-owned."""
        return [name for name in self.field_names if name not in ("id", "created_at")]


ENTITY_TYPES: Dict[EntityKind, EntityType] = {
    EntityKind.TASK: EntityType(
        kind=EntityKind.TASK,
        model=Task,
        table="tasks",
        label="Task",
        natural_key="week_start",
        soft_delete=True,
        bool_fields=("is_completed", "is_active"),
    ),
    EntityKind.DAILY: EntityType(
        kind=EntityKind.DAILY,
        model=DailyEntry,
        table="daily_entries",
        label="Daily entry",
        natural_key="date",
        order_by="date",
        date_field="date",
        json_fields=("photos", "voice_notes"),
        bool_fields=("activity_completed",),
    ),
    EntityKind.REFLECTION: EntityType(
        kind=EntityKind.REFLECTION,
        model=Reflection,
        table="reflections",
        label="Reflection",
        natural_key="date",
        date_field="date",
    ),
    EntityKind.REVIEW: EntityType(
        kind=EntityKind.REVIEW,
        model=WeeklyReview,
        table="weekly_reviews",
        label="Weekly review",
        natural_key="week_start",
        date_field="week_start",
    ),
}


def entity_type(kind: EntityKind) -> EntityType:
    """Return storage metadata for ``kind`` (accepts the enum or its value)."""
    return ENTITY_TYPES[EntityKind(kind)]
