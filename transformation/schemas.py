"""
Request Schemas.

Pydantic insert schemas for each record type. Creates validate against the
full schema; updates use the same field types with every field optional so
unspecified fields are left untouched. ``id`` and ``createdAt`` are not part
of any schema and are dropped if a client sends them.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Type

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from transformation.errors import ValidationError
from transformation.models import EntityKind, entity_type

IsoDate = Annotated[str, StringConstraints(pattern=r"^\d{4}-\d{2}-\d{2}$")]


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


# Stored exactly as sent
Title = Annotated[str, AfterValidator(_not_blank)]

EnergyLevel = Annotated[int, Field(ge=1, le=10)]
GrowthLevel = Annotated[int, Field(ge=1, le=5)]
Count = Annotated[int, Field(ge=0)]
PromiseKeptValue = Literal["yes", "partial", "no"]


class _Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        strict=True,
        extra="ignore",
    )


class TaskCreate(_Schema):
    title: Title
    week_start: IsoDate
    description: Optional[str] = None
    is_completed: bool = False
    is_active: bool = True


class TaskUpdate(_Schema):
    title: Optional[Title] = None
    week_start: Optional[IsoDate] = None
    description: Optional[str] = None
    is_completed: Optional[bool] = None
    is_active: Optional[bool] = None


class TaskCompletion(_Schema):
    completed: bool


class DailyEntryCreate(_Schema):
    date: IsoDate
    morning_intention: Optional[str] = None
    energy_level: Optional[EnergyLevel] = None
    suggested_task_id: Optional[str] = None
    ten_minute_activity: Optional[str] = None
    activity_completed: bool = False
    evening_reflection: Optional[str] = None
    promise_kept: Optional[PromiseKeptValue] = None
    follow_up_response: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    voice_notes: List[str] = Field(default_factory=list)


class DailyEntryUpdate(_Schema):
    date: Optional[IsoDate] = None
    morning_intention: Optional[str] = None
    energy_level: Optional[EnergyLevel] = None
    suggested_task_id: Optional[str] = None
    ten_minute_activity: Optional[str] = None
    activity_completed: Optional[bool] = None
    evening_reflection: Optional[str] = None
    promise_kept: Optional[PromiseKeptValue] = None
    follow_up_response: Optional[str] = None
    photos: Optional[List[str]] = None
    voice_notes: Optional[List[str]] = None


class ReflectionCreate(_Schema):
    prompt_id: str
    prompt_text: str
    response: str
    date: IsoDate
    follow_up_response: Optional[str] = None


class ReflectionUpdate(_Schema):
    prompt_id: Optional[str] = None
    prompt_text: Optional[str] = None
    response: Optional[str] = None
    date: Optional[IsoDate] = None
    follow_up_response: Optional[str] = None


class WeeklyReviewCreate(_Schema):
    week_start: IsoDate
    week_end: IsoDate
    proud_actions: Optional[str] = None
    self_respect_moments: Optional[str] = None
    patterns: Optional[str] = None
    next_week_cultivate: Optional[str] = None
    next_week_support: Optional[str] = None
    growth_level: GrowthLevel = 1
    promises_kept: Count = 0
    total_promises: Count = 0


class WeeklyReviewUpdate(_Schema):
    week_start: Optional[IsoDate] = None
    week_end: Optional[IsoDate] = None
    proud_actions: Optional[str] = None
    self_respect_moments: Optional[str] = None
    patterns: Optional[str] = None
    next_week_cultivate: Optional[str] = None
    next_week_support: Optional[str] = None
    growth_level: Optional[GrowthLevel] = None
    promises_kept: Optional[Count] = None
    total_promises: Optional[Count] = None


CREATE_SCHEMAS: Dict[EntityKind, Type[_Schema]] = {
    EntityKind.TASK: TaskCreate,
    EntityKind.DAILY: DailyEntryCreate,
    EntityKind.REFLECTION: ReflectionCreate,
    EntityKind.REVIEW: WeeklyReviewCreate,
}

UPDATE_SCHEMAS: Dict[EntityKind, Type[_Schema]] = {
    EntityKind.TASK: TaskUpdate,
    EntityKind.DAILY: DailyEntryUpdate,
    EntityKind.REFLECTION: ReflectionUpdate,
    EntityKind.REVIEW: WeeklyReviewUpdate,
}

# Fields that are required on create and may not be cleared by an update.
# Booleans, counters and lists are included: null is not a valid value for them.
NON_NULLABLE: Dict[EntityKind, tuple] = {
    EntityKind.TASK: ("title", "week_start", "is_completed", "is_active"),
    EntityKind.DAILY: ("date", "activity_completed", "photos", "voice_notes"),
    EntityKind.REFLECTION: ("prompt_id", "prompt_text", "response", "date"),
    EntityKind.REVIEW: (
        "week_start", "week_end", "growth_level", "promises_kept", "total_promises",
    ),
}


def invalid_data_message(kind: EntityKind) -> str:
    return f"Invalid {entity_type(kind).label.lower()} data"


def _validate(schema: Type[_Schema], kind: EntityKind, body: Any) -> _Schema:
    if not isinstance(body, dict):
        raise ValidationError(
            invalid_data_message(kind),
            errors=[{"msg": "Request body must be a JSON object"}],
        )
    try:
        return schema.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError(
            invalid_data_message(kind),
            errors=e.errors(include_url=False, include_context=False, include_input=False),
        )


def parse_create(kind: EntityKind, body: Any) -> Dict[str, Any]:
    """
    Validate a create payload.

    Args:
        kind: Record type being created
        body: Decoded JSON request body

    Returns:
        snake_case field values with defaults applied

    Raises:
        ValidationError: If required fields are missing or mistyped
    """
    kind = EntityKind(kind)
    return _validate(CREATE_SCHEMAS[kind], kind, body).model_dump()


def parse_update(kind: EntityKind, body: Any) -> Dict[str, Any]:
    """
    Validate a partial update payload.

    Returns:
        Only the fields the client supplied, snake_case

    Raises:
        ValidationError: If a field is mistyped or a required field is set to null
    """
    kind = EntityKind(kind)
    changes = _validate(UPDATE_SCHEMAS[kind], kind, body).model_dump(exclude_unset=True)
    cleared = [name for name in NON_NULLABLE[kind] if name in changes and changes[name] is None]
    if cleared:
        raise ValidationError(
            invalid_data_message(kind),
            errors=[{"loc": [to_camel(name)], "msg": "Field may not be null"} for name in cleared],
        )
    return changes


def parse_completion(body: Any) -> bool:
    """Validate the ``{completed: bool}`` body of the task completion toggle."""
    return _validate(TaskCompletion, EntityKind.TASK, body).completed
