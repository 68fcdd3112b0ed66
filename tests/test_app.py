"""Tests for ui/app.py: JSON API and HTML form routes."""

import pytest
from fastapi.testclient import TestClient

from ui.app import app


@pytest.fixture
def client(workspace):
    return TestClient(app)


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": "true"}


def test_session_runs_reset(client):
    data = client.get("/api/session").json()
    assert data["resetPerformed"] is True
    assert data["day"] in data["days"]
    assert client.get("/api/session").json()["resetPerformed"] is False

    items = client.get("/api/days/Monday/items").json()["items"]
    assert [i["checked"] for i in items] == [False, False]


def test_add_toggle_remove_clear(client):
    r = client.post("/api/days/friday/items", json={"name": "Deadlift"})
    assert r.status_code == 200
    body = r.json()
    assert body["day"] == "Friday"
    item_id = body["items"][0]["id"]

    r = client.post(f"/api/days/Friday/items/{item_id}/toggle")
    assert r.json()["items"][0]["checked"] is True

    client.post("/api/days/Friday/items", json={"name": "Bench"})
    r = client.delete(f"/api/days/Friday/items/{item_id}")
    assert [i["name"] for i in r.json()["items"]] == ["Bench"]

    r = client.delete("/api/days/Friday/items")
    assert r.json()["items"] == []


def test_add_blank_is_400(client):
    r = client.post("/api/days/Monday/items", json={"name": "  "})
    assert r.status_code == 400


def test_null_fields_read_as_empty(client):
    assert client.post("/api/days/Friday/items", json={"name": None}).status_code == 400
    assert client.get("/api/days/Friday/items").json()["items"] == []

    r = client.put("/api/days/Monday/note", json={"note": None})
    assert r.json() == {"day": "Monday", "note": ""}

    assert client.put("/api/user", json={"userName": None}).status_code == 400
    assert client.get("/api/user").json() == {"userName": ""}


def test_unknown_item_is_404(client):
    assert client.post("/api/days/Monday/items/nope/toggle").status_code == 404
    assert client.delete("/api/days/Monday/items/nope").status_code == 404


def test_unknown_day_is_404(client):
    assert client.get("/api/days/Someday/items").status_code == 404
    assert client.get("/api/days/Someday/note").status_code == 404


def test_notes(client):
    assert client.get("/api/days/Monday/note").json()["note"] == "3 sets of 15, rest 60s"
    r = client.put("/api/days/sat/note", json={"note": "Long run"})
    assert r.json() == {"day": "Saturday", "note": "Long run"}
    assert client.get("/api/days/Saturday/note").json()["note"] == "Long run"


def test_history_modes(client):
    summary = client.get("/api/history").json()
    assert summary["totalItems"] == 3
    assert len(summary["weekday"]) == 7

    months = client.get("/api/history", params={"mode": "month"}).json()
    assert [b["label"] for b in months["buckets"]] == ["2023-12", "2024-01", "2024-02"]

    assert client.get("/api/history", params={"mode": "decade"}).status_code == 400


def test_user_name(client):
    assert client.get("/api/user").json() == {"userName": ""}
    assert client.put("/api/user", json={"userName": ""}).status_code == 400
    client.put("/api/user", json={"userName": "Jordan"})
    assert client.get("/api/user").json() == {"userName": "Jordan"}
    assert "Train hard, Jordan!" in client.get("/").text


def test_index_and_forms(client):
    r = client.get("/", params={"day": "Monday"})
    assert r.status_code == 200
    assert "Pushups" in r.text

    r = client.post("/days/Tuesday/add", data={"name": "Lunges"}, follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/?day=Tuesday"
    assert "Lunges" in client.get("/", params={"day": "Tuesday"}).text

    client.post("/days/Monday/toggle/m1")
    assert client.get("/api/days/Monday/items").json()["items"][0]["checked"] is True

    client.post("/days/Monday/note", data={"note": "Core day"})
    assert client.get("/api/days/Monday/note").json()["note"] == "Core day"

    client.post("/days/Monday/remove/m2")
    client.post("/days/Monday/clear")
    assert client.get("/api/days/Monday/items").json()["items"] == []


def test_profile(client, workspace):
    assert client.get("/api/profile").json()["timezone"] == "UTC"

    r = client.put("/api/profile", json={"timezone": "Europe/Berlin", "default_history_mode": "year"})
    assert r.json()["timezone"] == "Europe/Berlin"
    assert "timezone: Europe/Berlin" in (workspace / "profile.yaml").read_text(encoding="utf-8")
    assert "History (year)" in client.get("/").text

    assert client.put("/api/profile", json={"timezone": "Mars/Olympus"}).status_code == 400
    assert client.put("/api/profile", json={"default_history_mode": "hourly"}).status_code == 400
