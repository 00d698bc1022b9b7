# transformation/tests/test_reviews.py


def test_create_weekly_review(client, review_payload):
    response = client.post("/api/weekly-review", json=review_payload)
    assert response.status_code == 200
    review = response.json()
    assert review["growthLevel"] == 4
    assert review["patterns"] is None


def test_create_weekly_review_defaults(client):
    response = client.post(
        "/api/weekly-review", json={"weekStart": "2026-10-12", "weekEnd": "2026-10-18"}
    )
    review = response.json()
    assert review["growthLevel"] == 1
    assert review["promisesKept"] == 0
    assert review["totalPromises"] == 0


def test_create_weekly_review_validation(client, review_payload):
    assert client.post("/api/weekly-review", json={"weekStart": "2026-10-12"}).status_code == 400
    response = client.post("/api/weekly-review", json={**review_payload, "growthLevel": 6})
    assert response.status_code == 400
    assert response.json() == {"message": "Invalid weekly review data"}


def test_get_weekly_review_by_week(client, review_payload):
    created = client.post("/api/weekly-review", json=review_payload).json()

    response = client.get("/api/weekly-review/2026-10-12")
    assert response.json()["id"] == created["id"]

    response = client.get("/api/weekly-review/2026-10-05")
    assert response.status_code == 200
    assert response.json() is None


def test_get_weekly_review_prefers_newest(client, review_payload):
    """Test the most recent review wins when a week has several."""
    client.post("/api/weekly-review", json={**review_payload, "patterns": "older"})
    client.post("/api/weekly-review", json={**review_payload, "patterns": "newer"})

    assert client.get("/api/weekly-review/2026-10-12").json()["patterns"] == "newer"


def test_get_all_weekly_reviews(client, review_payload):
    client.post("/api/weekly-review", json=review_payload)
    client.post(
        "/api/weekly-review",
        json={**review_payload, "weekStart": "2026-10-19", "weekEnd": "2026-10-25"},
    )

    response = client.get("/api/weekly-reviews-all")
    assert [r["weekStart"] for r in response.json()] == ["2026-10-19", "2026-10-12"]


def test_update_weekly_review(client, review_payload):
    created = client.post("/api/weekly-review", json=review_payload).json()

    response = client.put(f"/api/weekly-review/{created['id']}", json={"nextWeekCultivate": "Rest"})
    assert response.status_code == 200
    updated = response.json()
    assert updated["nextWeekCultivate"] == "Rest"
    assert updated["proudActions"] == created["proudActions"]
    assert updated["growthLevel"] == created["growthLevel"]


def test_update_unknown_weekly_review(client):
    response = client.put("/api/weekly-review/missing", json={"patterns": "x"})
    assert response.status_code == 404
    assert response.json() == {"message": "Weekly review not found"}


def test_delete_weekly_review(client, review_payload):
    created = client.post("/api/weekly-review", json=review_payload).json()

    assert client.delete(f"/api/weekly-review/{created['id']}").json() == {"success": True}
    assert client.get("/api/weekly-review/2026-10-12").json() is None
    assert client.delete(f"/api/weekly-review/{created['id']}").status_code == 404
