def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_compute_grade(client, payload):
    response = client.post("/grades", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] is True
    assert body["data"]["total"] == 75
    assert body["data"]["letter"] == "C+"
    assert body["data"]["pass"] is True
    assert body["data"]["deductions"] == payload["deductions"]
    assert list(body["data"]["categories"]) == [
        "opening_introduction",
        "rapport_building",
        "needs_discovery",
        "value_communication",
        "objection_handling",
        "closing",
    ]


def test_compute_grade_tolerates_malformed_payload(client):
    response = client.post(
        "/grades",
        json={"closing": {"points": "lots"}, "deductions": "none"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 0
    assert data["letter"] == "F"
    assert data["pass"] is False
    assert data["deductions"] == []


def test_compute_grade_accepts_non_object_json(client):
    response = client.post("/grades", json=["not", "an", "object"])

    assert response.status_code == 200
    assert response.json()["data"]["total"] == 0


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/nope")

    assert response.status_code == 404
    body = response.json()
    assert body["status"] is False
    assert body["error"] == {"code": 404}


def test_compute_grade_with_int_too_large_for_float(client):
    response = client.post(
        "/grades",
        content='{"closing": {"points": 1' + "0" * 400 + '}, "rapport_building": {"points": 1.5}}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 100
    assert data["letter"] == "A+"
