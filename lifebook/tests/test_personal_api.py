"""Goals, beliefs, triggers, protocols, identity, dating profile and genome uploads."""

from __future__ import annotations

import io

import pytest

pytestmark = pytest.mark.integration


# ==================== Collections ====================


def test_goals_crud_and_status_filter(client, auth_headers):
    created = client.post(
        "/api/goals", json={"title": "Run 10k", "target_date": "31/12/2024"}, headers=auth_headers
    )
    assert created.status_code == 201
    goal = created.get_json()["goal"]
    assert goal["status"] == "active"
    assert goal["target_date"] == "2024-12-31"

    client.post("/api/goals", json={"title": "Learn Welsh", "status": "paused"}, headers=auth_headers)
    active = client.get("/api/goals?status=active", headers=auth_headers).get_json()["goals"]
    assert [g["title"] for g in active] == ["Run 10k"]
    assert len(client.get("/api/goals", headers=auth_headers).get_json()["goals"]) == 2

    done = client.patch(f"/api/goals/{goal['id']}", json={"status": "done"}, headers=auth_headers)
    assert done.get_json()["goal"]["status"] == "done"
    assert client.patch(f"/api/goals/{goal['id']}", json={"status": "someday"}, headers=auth_headers).status_code == 400

    assert client.delete(f"/api/goals/{goal['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/goals/{goal['id']}", headers=auth_headers).status_code == 404


def test_triggers_validate_intensity(client, auth_headers):
    bad = client.post("/api/triggers", json={"title": "Crowds", "intensity": 11}, headers=auth_headers)
    assert bad.status_code == 400
    ok = client.post("/api/triggers", json={"title": "Crowds", "intensity": 7, "category": "social"}, headers=auth_headers)
    assert ok.get_json()["trigger"]["intensity"] == 7
    client.post("/api/triggers", json={"title": "Deadlines", "category": "work"}, headers=auth_headers)

    social = client.get("/api/triggers?category=social", headers=auth_headers).get_json()["triggers"]
    assert [t["title"] for t in social] == ["Crowds"]


def test_protocol_steps_and_beliefs(client, auth_headers):
    protocol = client.post(
        "/api/protocols", json={"title": "Wind down", "steps": "no screens, tea, read"}, headers=auth_headers
    ).get_json()["protocol"]
    assert protocol["steps"] == ["no screens", "tea", "read"]
    updated = client.put(f"/api/protocols/{protocol['id']}", json={"steps": ["tea"]}, headers=auth_headers)
    assert updated.get_json()["protocol"]["steps"] == ["tea"]

    belief = client.post(
        "/api/beliefs", json={"current_belief": "I am bad at maths"}, headers=auth_headers
    ).get_json()["belief"]
    assert belief["desired_belief"] is None
    assert client.post("/api/beliefs", json={}, headers=auth_headers).status_code == 400


def test_collections_are_private(client, auth_headers, other_headers):
    goal = client.post("/api/goals", json={"title": "Mine"}, headers=auth_headers).get_json()["goal"]
    assert client.get("/api/goals", headers=other_headers).get_json()["goals"] == []
    assert client.get(f"/api/goals/{goal['id']}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/goals/{goal['id']}", headers=other_headers).status_code == 404


# ==================== One-per-user profiles ====================


def test_identity_defaults_then_saves(client, auth_headers):
    identity = client.get("/api/identity", headers=auth_headers).get_json()["identity"]
    assert identity == {"vision": "", "core_values": [], "principles": [], "updated_at": None}

    client.post("/api/identity", json={"vision": "Calm and curious", "core_values": "honesty, play"}, headers=auth_headers)
    saved = client.post("/api/identity", json={"vision": "Calm, curious, kind"}, headers=auth_headers)
    identity = saved.get_json()["identity"]
    assert identity["vision"] == "Calm, curious, kind"
    assert identity["updated_at"]
    assert client.get("/api/identity", headers=auth_headers).get_json()["identity"]["vision"] == "Calm, curious, kind"


def test_dating_profile(client, auth_headers):
    profile = client.get("/api/dating", headers=auth_headers).get_json()["profile"]
    assert profile["self_reflection_answers"] == {}

    resp = client.post(
        "/api/dating",
        json={"partner_vision": "kind", "red_flags": ["rudeness"], "self_reflection_answers": {"1": "patience", "2": None}},
        headers=auth_headers,
    )
    profile = resp.get_json()["profile"]
    assert profile["red_flags"] == ["rudeness"]
    assert profile["self_reflection_answers"] == {"1": "patience", "2": ""}


# ==================== Genome ====================


def test_genome_upload_download_delete(client, auth_headers, other_headers):
    data = {"file": (io.BytesIO(b"rs123\tAA\n"), "genome.txt")}
    resp = client.post("/api/genome/upload", data=data, headers=auth_headers, content_type="multipart/form-data")
    assert resp.status_code == 201
    upload = resp.get_json()["upload"]
    assert upload["original_name"] == "genome.txt"

    listed = client.get("/api/genome", headers=auth_headers).get_json()["uploads"]
    assert [u["id"] for u in listed] == [upload["id"]]

    download = client.get(f"/api/genome/{upload['id']}/download", headers=auth_headers)
    assert download.status_code == 200
    assert download.data == b"rs123\tAA\n"
    assert "genome.txt" in download.headers["Content-Disposition"]
    download.close()

    assert client.get(f"/api/genome/{upload['id']}/download", headers=other_headers).status_code == 404
    assert client.delete(f"/api/genome/{upload['id']}", headers=auth_headers).status_code == 200
    assert client.get("/api/genome", headers=auth_headers).get_json()["uploads"] == []
