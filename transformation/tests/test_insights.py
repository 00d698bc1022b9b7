# transformation/tests/test_insights.py
from transformation.activity import (
    HIGH_ENERGY_ACTIVITIES,
    LOW_ENERGY_ACTIVITIES,
    MEDIUM_ENERGY_ACTIVITIES,
    templates_for,
)


def _kept(client, day, **fields):
    return client.post("/api/daily", json={"date": day, "promiseKept": "yes", **fields}).json()


def test_reflection_prompts(client):
    """Test GET /api/reflection-prompts returns the fixed catalog."""
    response = client.get("/api/reflection-prompts")
    assert response.status_code == 200
    prompts = response.json()
    assert [p["id"] for p in prompts] == ["self-promise", "resistance", "authenticity", "release"]
    assert set(prompts[0]["responses"]) == {"yes", "no"}
    assert "followUp" in prompts[1]["responses"]


def test_streak_with_explicit_today(client):
    """Test GET /api/insights/streak counts back from ?today=."""
    _kept(client, "2026-10-18")
    _kept(client, "2026-10-17")
    _kept(client, "2026-10-15")

    response = client.get("/api/insights/streak", params={"today": "2026-10-18"})
    assert response.status_code == 200
    assert response.json() == {
        "consecutiveDays": 2,
        "milestoneReached": False,
        "asOf": "2026-10-18",
    }


def test_streak_resets_without_entry_today(client):
    _kept(client, "2026-10-17")
    response = client.get("/api/insights/streak", params={"today": "2026-10-18"})
    assert response.json()["consecutiveDays"] == 0


def test_streak_rejects_bad_date(client):
    response = client.get("/api/insights/streak", params={"today": "yesterday"})
    assert response.status_code == 400


def test_week_stats(client):
    """Test GET /api/insights/week/{start}/{end} tallies substantive entries."""
    _kept(client, "2026-10-12", morningIntention="Write")
    _kept(client, "2026-10-13", energyLevel=4)
    client.post("/api/daily", json={"date": "2026-10-14", "eveningReflection": "Skipped", "promiseKept": "no"})
    _kept(client, "2026-10-15")  # nothing substantive
    _kept(client, "2026-10-20", morningIntention="Next week")

    response = client.get("/api/insights/week/2026-10-12/2026-10-18")
    assert response.status_code == 200
    assert response.json() == {"promisesKept": 2, "totalPromises": 3, "growthLevel": 4}


def test_week_stats_empty_week(client):
    response = client.get("/api/insights/week/2026-10-12/2026-10-18")
    assert response.json() == {"promisesKept": 0, "totalPromises": 0, "growthLevel": 1}


def test_activity_suggestion_from_task(client, task_payload):
    """Test GET /api/suggestions/activity draws from an incomplete task."""
    task = client.post("/api/tasks", json=task_payload).json()

    response = client.get("/api/suggestions/activity", params={"weekStart": "2026-10-12"})
    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "task"
    assert data["suggestedTaskId"] == task["id"]
    allowed = {t.replace("{title}", task["title"]) for t in templates_for(task["title"])}
    assert data["activity"] in allowed


def test_activity_suggestion_skips_completed_tasks(client, task_payload):
    task = client.post("/api/tasks", json=task_payload).json()
    client.patch(f"/api/tasks/{task['id']}/complete", json={"completed": True})

    data = client.get("/api/suggestions/activity").json()
    assert data["source"] == "energy"
    assert data["suggestedTaskId"] is None
    assert data["activity"] in MEDIUM_ENERGY_ACTIVITIES


def test_activity_suggestion_by_energy(client, task_payload):
    client.post("/api/tasks", json=task_payload)

    data = client.get(
        "/api/suggestions/activity", params={"source": "energy", "energyLevel": 2}
    ).json()
    assert data["source"] == "energy"
    assert data["activity"] in LOW_ENERGY_ACTIVITIES

    data = client.get(
        "/api/suggestions/activity", params={"source": "energy", "energyLevel": 9}
    ).json()
    assert data["activity"] in HIGH_ENERGY_ACTIVITIES


def test_activity_suggestion_validates_energy(client):
    response = client.get("/api/suggestions/activity", params={"energyLevel": 11})
    assert response.status_code == 400
    assert response.json() == {"message": "Invalid request"}
