"""
Streak and weekly aggregate calculations.

Pure functions over already-fetched daily entries. The "today" anchor of the
streak walk is always passed in explicitly so results are reproducible.
"""

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Tuple

from transformation.models import DailyEntry, PromiseKept

# Days of consecutive kept promises celebrated as a formed habit
HABIT_MILESTONE_DAYS = 66

MIN_GROWTH_LEVEL = 1
MAX_GROWTH_LEVEL = 5


@dataclass
class WeeklyStats:
    """Promise tally for one week."""
    promises_kept: int
    total_promises: int
    growth_level: int

    def to_dict(self) -> dict:
        return {
            "promisesKept": self.promises_kept,
            "totalPromises": self.total_promises,
            "growthLevel": self.growth_level,
        }


def consecutive_days(entries: Iterable[DailyEntry], as_of: date) -> int:
    """
    Count consecutive days of kept promises ending on ``as_of``.

    Entries with ``promise_kept == "yes"`` are walked newest date first and
    compared against ``as_of``, ``as_of - 1 day``, ... The walk stops at the
    first gap, so the result is 0 when ``as_of`` itself has no kept promise.
    Several kept entries on the same date count once.

    Args:
        entries: Daily entries in any order
        as_of: The day the streak must end on

    Returns:
        Length of the streak
    """
    kept_dates = sorted(
        {entry.date for entry in entries if entry.promise_kept == PromiseKept.YES.value},
        reverse=True,
    )

    streak = 0
    for offset, entry_date in enumerate(kept_dates):
        expected = (as_of - timedelta(days=offset)).isoformat()
        if entry_date != expected:
            break
        streak += 1
    return streak


def milestone_reached(days: int) -> bool:
    """Whether a streak has reached the habit milestone."""
    return days >= HABIT_MILESTONE_DAYS


def is_substantive(entry: DailyEntry) -> bool:
    """An entry counts toward the week once it has an intention, reflection or energy level."""
    return bool(entry.morning_intention) or bool(entry.evening_reflection) \
        or entry.energy_level is not None


def growth_level(promises_kept: int, total_promises: int) -> int:
    """Map a completion ratio to the 1-5 growth scale."""
    ratio = promises_kept / max(total_promises, 1)
    level = math.ceil(ratio * MAX_GROWTH_LEVEL)
    return min(MAX_GROWTH_LEVEL, max(MIN_GROWTH_LEVEL, level))


def weekly_stats(entries: Iterable[DailyEntry]) -> WeeklyStats:
    """
    Summarise one week of daily entries.

    Args:
        entries: Entries already restricted to the week

    Returns:
        WeeklyStats with substantive entry count, kept promises and growth level
    """
    substantive = [entry for entry in entries if is_substantive(entry)]
    kept = sum(1 for entry in substantive if entry.promise_kept == PromiseKept.YES.value)
    total = len(substantive)
    return WeeklyStats(
        promises_kept=kept,
        total_promises=total,
        growth_level=growth_level(kept, total),
    )


def week_bounds(day: date) -> Tuple[str, str]:
    """
    Monday-anchored week containing ``day``.

    Returns:
        (week_start, week_end) as ISO date strings, Monday and Sunday
    """
    start = day - timedelta(days=day.weekday())
    end = start + timedelta(days=6)
    return start.isoformat(), end.isoformat()
