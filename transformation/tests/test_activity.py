# transformation/tests/test_activity.py
import random

import pytest

from transformation.activity import (
    ACTIVITY_CATEGORIES,
    DEFAULT_TEMPLATES,
    HIGH_ENERGY_ACTIVITIES,
    LOW_ENERGY_ACTIVITIES,
    MEDIUM_ENERGY_ACTIVITIES,
    energy_band,
    generate_activity,
    match_category,
    pick_suggested_task,
    suggest_activity,
    suggest_energy_activity,
)
from transformation.models import Task

WRITING = next(c for c in ACTIVITY_CATEGORIES if c.name == "writing")


def _expand(templates, title):
    return {t.replace("{title}", title) for t in templates}


def test_writing_title_always_uses_writing_templates():
    """Every suggestion for a writing task comes from the writing set."""
    title = "Write my novel chapter"
    allowed = _expand(WRITING.templates, title)
    defaults = _expand(DEFAULT_TEMPLATES, title)
    rng = random.Random(7)

    seen = set()
    for _ in range(200):
        activity = suggest_activity(title, rng)
        assert title in activity
        assert activity in allowed
        assert activity not in defaults
        seen.add(activity)

    # Uniform pick should reach more than one template
    assert len(seen) > 1


def test_keyword_match_is_case_insensitive():
    assert match_category("WORKOUT at the gym").name == "exercise"


def test_first_matching_category_wins():
    """'book' is a writing keyword, so it beats 'read' further down the list."""
    assert match_category("Read a book").name == "writing"
    assert match_category("Plan a workout").name == "exercise"


def test_unmatched_title_uses_default_templates():
    title = "Do taxes"
    assert match_category(title) is None
    for _ in range(20):
        assert suggest_activity(title) in _expand(DEFAULT_TEMPLATES, title)


@pytest.mark.parametrize("level,band", [
    (1, "low"), (3, "low"), (4, "medium"), (7, "medium"), (8, "high"), (10, "high"),
])
def test_energy_bands(level, band):
    assert energy_band(level) == band


def test_energy_activity_sets():
    rng = random.Random(1)
    assert suggest_energy_activity(2, rng) in LOW_ENERGY_ACTIVITIES
    assert suggest_energy_activity(5, rng) in MEDIUM_ENERGY_ACTIVITIES
    assert suggest_energy_activity(9, rng) in HIGH_ENERGY_ACTIVITIES


def test_generate_activity_prefers_task_title():
    title = "Write my novel chapter"
    assert generate_activity(title, energy_level=1) in _expand(WRITING.templates, title)


def test_generate_activity_defaults_to_medium_energy():
    assert generate_activity() in MEDIUM_ENERGY_ACTIVITIES
    assert generate_activity(energy_level=2) in LOW_ENERGY_ACTIVITIES


def test_pick_suggested_task_only_incomplete():
    done = Task(id="1", title="Done", week_start="2026-10-12", is_completed=True)
    open_task = Task(id="2", title="Open", week_start="2026-10-12")
    rng = random.Random(3)

    for _ in range(20):
        assert pick_suggested_task([done, open_task], rng) is open_task


def test_pick_suggested_task_none_when_all_complete():
    done = Task(id="1", title="Done", week_start="2026-10-12", is_completed=True)
    assert pick_suggested_task([done]) is None
    assert pick_suggested_task([]) is None
