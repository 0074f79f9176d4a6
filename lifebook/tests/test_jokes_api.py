"""Jokes API tests."""

from __future__ import annotations

from unittest.mock import patch

import pytest

pytestmark = pytest.mark.integration


@pytest.fixture
def joke(client, auth_headers):
    resp = client.post(
        "/api/jokes",
        json={"title": "Ducks", "content": "Put it on my bill.", "category": "pun", "difficulty": "easy"},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    return resp.get_json()["joke"]


def test_create_and_filter_by_category(client, auth_headers, joke):
    client.post("/api/jokes", json={"title": "Long one", "content": "...", "category": "story"}, headers=auth_headers)
    puns = client.get("/api/jokes?category=pun", headers=auth_headers).get_json()["jokes"]
    assert [j["id"] for j in puns] == [joke["id"]]
    assert len(client.get("/api/jokes", headers=auth_headers).get_json()["jokes"]) == 2


def test_difficulty_is_validated(client, auth_headers, joke):
    resp = client.post("/api/jokes", json={"title": "t", "content": "c", "difficulty": "brutal"}, headers=auth_headers)
    assert resp.status_code == 400
    resp = client.patch(f"/api/jokes/{joke['id']}", json={"difficulty": "brutal"}, headers=auth_headers)
    assert resp.status_code == 400


def test_update_told_and_delete(client, auth_headers, other_headers, joke):
    updated = client.put(f"/api/jokes/{joke['id']}", json={"notes": "slow delivery"}, headers=auth_headers)
    assert updated.get_json()["joke"]["notes"] == "slow delivery"

    told = client.post(f"/api/jokes/{joke['id']}/told", json={"success_rating": 6}, headers=auth_headers)
    assert told.get_json()["joke"]["times_told"] == 1
    assert told.get_json()["joke"]["success_rating"] == 6

    assert client.get(f"/api/jokes/{joke['id']}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/jokes/{joke['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/jokes/{joke['id']}", headers=auth_headers).status_code == 404


def test_tag_person_is_idempotent(client, auth_headers, joke):
    person = client.post("/api/people", json={"name": "Ana"}, headers=auth_headers).get_json()["person"]
    url = f"/api/jokes/{joke['id']}/tag-person/{person['id']}"
    first = client.post(url, headers=auth_headers).get_json()["link"]
    second = client.post(url, headers=auth_headers).get_json()["link"]
    assert first["id"] == second["id"]

    jokes = client.get(f"/api/jokes/person/{person['id']}", headers=auth_headers).get_json()["jokes"]
    assert [j["id"] for j in jokes] == [joke["id"]]

    assert client.delete(url, headers=auth_headers).status_code == 200
    assert client.get(f"/api/jokes/person/{person['id']}", headers=auth_headers).get_json()["jokes"] == []


def test_jokes_for_unknown_person(client, auth_headers):
    assert client.get("/api/jokes/person/999", headers=auth_headers).status_code == 404


# ==================== LLM ====================


def test_generate_unavailable_without_llm(client, auth_headers):
    resp = client.post("/api/jokes/generate", json={"prompt": "a joke about ducks"}, headers=auth_headers)
    assert resp.status_code == 503
    assert resp.get_json()["error"] == "llm_unavailable"


def test_generate_returns_draft_without_saving(client, auth_headers, llm):
    reply = {"content": "Why did the duck cross the road?", "category": "one-liner"}
    with patch.object(llm, "complete_json", return_value=reply):
        resp = client.post(
            "/api/jokes/generate", json={"prompt": "a joke about ducks", "difficulty": "easy"}, headers=auth_headers
        )
    draft = resp.get_json()["joke"]
    assert draft["title"] == "a joke about ducks"
    assert draft["difficulty"] == "easy"
    assert draft["category"] == "one-liner"
    assert client.get("/api/jokes", headers=auth_headers).get_json()["jokes"] == []


def test_iterate(client, auth_headers, joke, llm):
    assert client.post(f"/api/jokes/{joke['id']}/iterate", json={}, headers=auth_headers).status_code == 503

    reply = {"improved_joke": {"title": "Ducks", "content": "Bill me later."}, "suggestions": ["pause first"]}
    with patch.object(llm, "complete_json", return_value=reply) as complete:
        resp = client.post(
            f"/api/jokes/{joke['id']}/iterate",
            json={"conversation_history": [{"role": "user", "content": "shorter please"}]},
            headers=auth_headers,
        )
    body = resp.get_json()
    assert body["improved_joke"]["content"] == "Bill me later."
    assert body["suggestions"] == ["pause first"]
    assert body["explanation"] == ""
    assert "user: shorter please" in complete.call_args.args[0]
