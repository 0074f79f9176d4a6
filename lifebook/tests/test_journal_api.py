"""Journal API tests.

- GET /api/journal - list (paginated, filters)
- GET /api/journal/<id>
- POST /api/journal
- PUT/PATCH /api/journal/<id>
- DELETE /api/journal/<id>
- POST /api/journal/<id>/insights
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

pytestmark = pytest.mark.integration


def _create(client, headers, **fields):
    payload = {"content": "Met Jo at the market", "mood": "Happy", "tags": "market, friends"}
    payload.update(fields)
    return client.post("/api/journal", json=payload, headers=headers)


# ==================== Create ====================


def test_create_entry_normalises_fields(client, auth_headers, user):
    resp = _create(client, auth_headers)
    assert resp.status_code == 201
    entry = resp.get_json()["entry"]
    assert entry["user_id"] == user["id"]
    assert entry["mood"] == "happy"
    assert entry["tags"] == ["market", "friends"]
    assert entry["created_at"]


def test_create_entry_requires_content(client, auth_headers):
    resp = client.post("/api/journal", json={"content": ""}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


# ==================== List ====================


def test_list_empty(client, auth_headers):
    body = client.get("/api/journal", headers=auth_headers).get_json()
    assert body["items"] == []
    assert body["total"] == 0


def test_list_paginates_newest_first(client, auth_headers):
    for index in range(3):
        _create(client, auth_headers, content=f"entry {index}")

    body = client.get("/api/journal?per_page=2", headers=auth_headers).get_json()
    assert body["total"] == 3
    assert body["pages"] == 2
    assert [item["content"] for item in body["items"]] == ["entry 2", "entry 1"]

    second = client.get("/api/journal?per_page=2&page=2", headers=auth_headers).get_json()
    assert [item["content"] for item in second["items"]] == ["entry 0"]


def test_list_filters_by_mood(client, auth_headers):
    _create(client, auth_headers, mood="sad")
    _create(client, auth_headers, mood="calm")
    body = client.get("/api/journal?mood=sad", headers=auth_headers).get_json()
    assert [item["mood"] for item in body["items"]] == ["sad"]


def test_date_range_route_rejects_bad_dates(client, auth_headers):
    resp = client.get("/api/journal/date-range/yesterday/today", headers=auth_headers)
    assert resp.status_code == 400


def test_list_is_scoped_to_user(client, auth_headers, other_headers):
    _create(client, auth_headers)
    body = client.get("/api/journal", headers=other_headers).get_json()
    assert body["items"] == []


# ==================== Get / Update / Delete ====================


def test_get_update_delete(client, auth_headers):
    entry_id = _create(client, auth_headers).get_json()["entry"]["id"]

    fetched = client.get(f"/api/journal/{entry_id}", headers=auth_headers)
    assert fetched.status_code == 200

    updated = client.patch(f"/api/journal/{entry_id}", json={"tags": ["edited"]}, headers=auth_headers)
    assert updated.status_code == 200
    assert updated.get_json()["entry"]["tags"] == ["edited"]
    assert updated.get_json()["entry"]["content"] == "Met Jo at the market"

    assert client.delete(f"/api/journal/{entry_id}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/journal/{entry_id}", headers=auth_headers).status_code == 404


def test_other_users_entry_looks_missing(client, auth_headers, other_headers):
    entry_id = _create(client, auth_headers).get_json()["entry"]["id"]

    assert client.get(f"/api/journal/{entry_id}", headers=other_headers).status_code == 404
    resp = client.put(f"/api/journal/{entry_id}", json={"content": "mine now"}, headers=other_headers)
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "not_found"
    assert client.delete(f"/api/journal/{entry_id}", headers=other_headers).status_code == 404


# ==================== Insights ====================


def test_insights_fall_back_without_llm(client, auth_headers):
    entry_id = _create(client, auth_headers).get_json()["entry"]["id"]
    insights = client.post(f"/api/journal/{entry_id}/insights", headers=auth_headers).get_json()["insights"]
    assert insights["available"] is False
    assert insights["themes"] == []


def test_insights_use_llm_reply(client, auth_headers, llm):
    entry_id = _create(client, auth_headers).get_json()["entry"]["id"]
    reply = {"themes": ["friendship"], "emotions": ["joy"], "summary": "A good day."}
    with patch.object(llm, "complete_json", return_value=reply):
        insights = client.post(f"/api/journal/{entry_id}/insights", headers=auth_headers).get_json()["insights"]
    assert insights["available"] is True
    assert insights["themes"] == ["friendship"]
    assert insights["reflection_questions"] == []
