"""
Insights API endpoints.

Derived data computed from stored records: the kept-promise streak, weekly
promise statistics, ten-minute activity suggestions and the reflection
prompt catalog.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from transformation.activity import generate_activity, pick_suggested_task
from transformation.api.deps import get_store, handle_errors
from transformation.models import EntityKind
from transformation.prompts import REFLECTION_PROMPTS
from transformation.storage import RecordStore
from transformation.streaks import consecutive_days, milestone_reached, weekly_stats

logger = logging.getLogger(__name__)

router = APIRouter(tags=["insights"])


@router.get("/reflection-prompts")
async def get_reflection_prompts() -> List[Dict[str, Any]]:
    """Get the fixed reflection prompt catalog."""
    return [prompt.to_dict() for prompt in REFLECTION_PROMPTS]


@router.get("/suggestions/activity")
def get_activity_suggestion(
    week_start: Optional[str] = Query(
        default=None,
        alias="weekStart",
        description="Draw the task from this week's tasks (YYYY-MM-DD)"
    ),
    energy_level: Optional[int] = Query(
        default=None,
        alias="energyLevel",
        ge=1,
        le=10,
        description="Energy level 1-10 for energy-based suggestions"
    ),
    source: Optional[Literal["task", "energy"]] = Query(
        default=None,
        description="Force a task- or energy-based suggestion"
    ),
    store: RecordStore = Depends(get_store),
) -> Dict[str, Any]:
    """
    Suggest a ten-minute activity.

    Picks a random incomplete active task and builds a task-based suggestion
    from its title. Falls back to an energy-based suggestion when there is no
    incomplete task or ``source=energy`` is requested.

    Returns:
        Dictionary with activity, suggestedTaskId and source
    """
    with handle_errors("Failed to suggest activity"):
        task = None
        if source != "energy":
            filters = {"week_start": week_start} if week_start else None
            task = pick_suggested_task(store.list(EntityKind.TASK, filters))

        return {
            "activity": generate_activity(task.title if task else None, energy_level),
            "suggestedTaskId": task.id if task else None,
            "source": "task" if task else "energy",
        }


@router.get("/insights/streak")
def get_streak(
    today: Optional[date] = Query(
        default=None,
        description="Day the streak must end on (YYYY-MM-DD); server date when omitted"
    ),
    store: RecordStore = Depends(get_store),
) -> Dict[str, Any]:
    """Get the number of consecutive days of kept promises ending today."""
    with handle_errors("Failed to calculate streak"):
        as_of = today or date.today()
        days = consecutive_days(store.list(EntityKind.DAILY), as_of=as_of)
        return {
            "consecutiveDays": days,
            "milestoneReached": milestone_reached(days),
            "asOf": as_of.isoformat(),
        }


@router.get("/insights/week/{week_start}/{week_end}")
def get_week_stats(
    week_start: str,
    week_end: str,
    store: RecordStore = Depends(get_store),
) -> Dict[str, Any]:
    """Get promisesKept, totalPromises and growthLevel for an inclusive date range."""
    with handle_errors("Failed to calculate weekly stats"):
        entries = store.list_for_date_range(EntityKind.DAILY, week_start, week_end)
        return weekly_stats(entries).to_dict()
