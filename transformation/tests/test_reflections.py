# transformation/tests/test_reflections.py


def test_create_reflection(client, reflection_payload):
    response = client.post("/api/reflections", json=reflection_payload)
    assert response.status_code == 200
    reflection = response.json()
    assert reflection["promptId"] == "resistance"
    assert reflection["followUpResponse"] is None
    assert reflection["id"]


def test_create_reflection_requires_response(client, reflection_payload):
    payload = dict(reflection_payload)
    del payload["response"]
    response = client.post("/api/reflections", json=payload)
    assert response.status_code == 400
    assert response.json() == {"message": "Invalid reflection data"}


def test_get_reflections_with_and_without_date(client, reflection_payload):
    """Test GET /api/reflections and /api/reflections/{date}."""
    client.post("/api/reflections", json=reflection_payload)
    client.post("/api/reflections", json={**reflection_payload, "date": "2026-10-15"})

    assert len(client.get("/api/reflections").json()) == 2

    response = client.get("/api/reflections/2026-10-15")
    assert response.status_code == 200
    assert [r["date"] for r in response.json()] == ["2026-10-15"]

    assert client.get("/api/reflections/2026-01-01").json() == []


def test_get_all_reflections_newest_first(client, reflection_payload):
    for text in ("one", "two"):
        client.post("/api/reflections", json={**reflection_payload, "response": text})

    response = client.get("/api/reflections-all")
    assert [r["response"] for r in response.json()] == ["two", "one"]


def test_update_reflection_follow_up(client, reflection_payload):
    created = client.post("/api/reflections", json=reflection_payload).json()

    response = client.put(
        f"/api/reflections/{created['id']}", json={"followUpResponse": "It protects my time"}
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["followUpResponse"] == "It protects my time"
    assert updated["response"] == created["response"]


def test_update_unknown_reflection(client):
    response = client.put("/api/reflections/missing", json={"response": "x"})
    assert response.status_code == 404
    assert response.json() == {"message": "Reflection not found"}


def test_delete_reflection(client, reflection_payload):
    created = client.post("/api/reflections", json=reflection_payload).json()

    assert client.delete(f"/api/reflections/{created['id']}").json() == {"success": True}
    assert client.get("/api/reflections-all").json() == []
    assert client.delete(f"/api/reflections/{created['id']}").status_code == 404
