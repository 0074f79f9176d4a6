"""Health exporter webhook."""

import pytest

from lifebook.core import records

pytestmark = pytest.mark.integration

URL = "/api/ingest/apple-health"
TOKEN = {"X-Ingest-Token": "ingest-test-token"}


def test_rejects_missing_or_wrong_token(client, user):
    assert client.post(URL, json={"user_id": user["id"]}).status_code == 401
    resp = client.post(URL, json={"user_id": user["id"]}, headers={"X-Ingest-Token": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "unauthorized"


def test_stores_full_payload(client, app, user):
    body = {"user_id": user["id"], "event_date": "2024-09-01", "steps": 8123, "sleep_hours": 7.5}
    resp = client.post(URL, json=body, headers=TOKEN)
    assert resp.status_code == 201
    result = resp.get_json()
    assert result["status"] == "stored"

    with app.app_context():
        event = records.get_owned("health_intake_events", user["id"], result["event_id"])
    assert event["event_type"] == "daily_summary"
    assert event["source"] == "apple_health_shortcut"
    assert event["event_date"] == "2024-09-01"
    assert event["payload"]["steps"] == 8123


def test_accepts_bearer_token(client, user):
    resp = client.post(URL, json={"user_id": user["id"]}, headers={"Authorization": "Bearer ingest-test-token"})
    assert resp.status_code == 201


def test_unknown_user(client):
    resp = client.post(URL, json={"user_id": 4040}, headers=TOKEN)
    assert resp.status_code == 404


def test_user_id_required(client):
    resp = client.post(URL, json={"steps": 1}, headers=TOKEN)
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "user_id"
