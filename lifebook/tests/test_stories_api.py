"""Stories and practice API tests."""

from __future__ import annotations

from unittest.mock import patch

import pytest

pytestmark = pytest.mark.integration


@pytest.fixture
def story(client, auth_headers):
    resp = client.post(
        "/api/stories",
        json={"title": "The lost ferry", "content": "I missed the last ferry twice in one night.", "tags": "travel"},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    return resp.get_json()["story"]


@pytest.fixture
def person(client, auth_headers):
    resp = client.post("/api/people", json={"name": "Sam", "interests": ["sailing"]}, headers=auth_headers)
    return resp.get_json()["person"]


# ==================== CRUD ====================


def test_create_story_defaults(story):
    assert story["tone"] == "casual"
    assert story["duration_seconds"] == 30
    assert story["times_told"] == 0
    assert story["tags"] == ["travel"]


def test_create_story_checks_journal_entry(client, auth_headers, other_headers):
    foreign = client.post("/api/journal", json={"content": "not yours"}, headers=other_headers).get_json()["entry"]
    resp = client.post(
        "/api/stories",
        json={"title": "t", "content": "c", "journal_entry_id": foreign["id"]},
        headers=auth_headers,
    )
    assert resp.status_code == 404


def test_list_and_filter_by_tone(client, auth_headers, story):
    client.post(
        "/api/stories", json={"title": "Deep", "content": "...", "tone": "thoughtful"}, headers=auth_headers
    )
    body = client.get("/api/stories?tone=thoughtful", headers=auth_headers).get_json()
    assert body["total"] == 1
    assert body["items"][0]["title"] == "Deep"
    assert client.get("/api/stories", headers=auth_headers).get_json()["total"] == 2


def test_update_and_delete(client, auth_headers, story):
    resp = client.put(f"/api/stories/{story['id']}", json={"tone": "funny"}, headers=auth_headers)
    assert resp.get_json()["story"]["tone"] == "funny"
    assert resp.get_json()["story"]["title"] == "The lost ferry"

    assert client.delete(f"/api/stories/{story['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/stories/{story['id']}", headers=auth_headers).status_code == 404


def test_mark_told_counts_and_rates(client, auth_headers, story):
    client.post(f"/api/stories/{story['id']}/told", json={}, headers=auth_headers)
    resp = client.post(f"/api/stories/{story['id']}/told", json={"success_rating": 8}, headers=auth_headers)
    told = resp.get_json()["story"]
    assert told["times_told"] == 2
    assert told["success_rating"] == 8


def test_story_is_private(client, other_headers, story):
    assert client.get(f"/api/stories/{story['id']}", headers=other_headers).status_code == 404
    assert client.post(f"/api/stories/{story['id']}/told", json={}, headers=other_headers).status_code == 404


# ==================== LLM features ====================


def test_extract_without_llm_returns_nothing(client, auth_headers):
    entry = client.post("/api/journal", json={"content": "A pigeon stole my sandwich"}, headers=auth_headers)
    resp = client.post(f"/api/stories/extract/{entry.get_json()['entry']['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["stories"] == []


def test_extract_shapes_llm_candidates(client, auth_headers, llm):
    entry_id = client.post("/api/journal", json={"content": "A pigeon stole my sandwich"}, headers=auth_headers)
    entry_id = entry_id.get_json()["entry"]["id"]
    reply = {"stories": [{"title": "Pigeon heist", "core_event": "A pigeon took lunch"}, {"core_event": "untitled"}]}
    with patch.object(llm, "complete_json", return_value=reply):
        stories = client.post(f"/api/stories/extract/{entry_id}", headers=auth_headers).get_json()["stories"]
    assert stories == [
        {
            "title": "Pigeon heist",
            "core_event": "A pigeon took lunch",
            "tone": "casual",
            "interest_reason": "",
            "journal_entry_id": entry_id,
        }
    ]


def test_refine_keeps_original_text_without_llm(client, auth_headers, story):
    resp = client.post(
        f"/api/stories/{story['id']}/refine", json={"tone": "funny", "duration": 45}, headers=auth_headers
    )
    refined = resp.get_json()["story"]
    assert refined["content"] == story["content"]
    assert refined["tone"] == "funny"
    assert refined["duration_seconds"] == 45


def test_refine_stores_llm_rewrite(client, auth_headers, story, llm):
    with patch.object(llm, "complete", return_value="So there I was, ferry-less. Again."):
        refined = client.post(f"/api/stories/{story['id']}/refine", json={}, headers=auth_headers).get_json()
    assert refined["story"]["content"] == "So there I was, ferry-less. Again."


def test_conversation_starters_are_saved(client, auth_headers, story, llm):
    reply = {"questions": ["Ever missed a ferry?", " ", "Worst travel night?"]}
    with patch.object(llm, "complete_json", return_value=reply):
        resp = client.post(f"/api/stories/{story['id']}/conversation-starters", headers=auth_headers)
    saved = resp.get_json()["conversation_starters"]
    assert [s["question"] for s in saved] == ["Ever missed a ferry?", "Worst travel night?"]

    listed = client.get(
        f"/api/practice/conversation-starters?story_id={story['id']}", headers=auth_headers
    ).get_json()["conversation_starters"]
    assert len(listed) == 2
    assert listed[0]["story_title"] == "The lost ferry"


# ==================== People tags ====================


def test_tag_and_untag_person(client, auth_headers, story, person):
    first = client.post(f"/api/stories/{story['id']}/people", json={"person_id": person["id"]}, headers=auth_headers)
    again = client.post(f"/api/stories/{story['id']}/people", json={"person_id": person["id"]}, headers=auth_headers)
    assert first.status_code == 201
    assert first.get_json()["link"]["id"] == again.get_json()["link"]["id"]

    detail = client.get(f"/api/stories/{story['id']}", headers=auth_headers).get_json()["story"]
    assert [p["name"] for p in detail["people"]] == ["Sam"]

    resp = client.delete(f"/api/stories/{story['id']}/people/{person['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert client.get(f"/api/stories/{story['id']}/people", headers=auth_headers).get_json()["people"] == []


def test_cannot_tag_someone_elses_person(client, auth_headers, other_headers, story):
    theirs = client.post("/api/people", json={"name": "Not yours"}, headers=other_headers).get_json()["person"]
    resp = client.post(f"/api/stories/{story['id']}/people", json={"person_id": theirs["id"]}, headers=auth_headers)
    assert resp.status_code == 404


# ==================== Practice ====================


def test_practice_sessions_and_stats(client, auth_headers, story):
    created = client.post("/api/practice/sessions", json={"story_id": story["id"]}, headers=auth_headers)
    assert created.status_code == 201
    session = created.get_json()["session"]
    assert session["session_type"] == "storytelling"

    client.post("/api/practice/sessions", json={"session_type": "small talk"}, headers=auth_headers)

    listed = client.get("/api/practice/sessions", headers=auth_headers).get_json()
    assert listed["total"] == 2
    fetched = client.get(f"/api/practice/sessions/{session['id']}", headers=auth_headers).get_json()["session"]
    assert fetched["story_title"] == "The lost ferry"

    stats = client.get("/api/practice/stats", headers=auth_headers).get_json()["stats"]
    assert stats["total_sessions"] == 2
    assert stats["stories_practiced"] == 1
    assert stats["recent_sessions"] == 2
    assert stats["avg_rating"] == 0


def test_practice_session_for_unknown_story(client, auth_headers):
    assert client.post("/api/practice/sessions", json={"story_id": 999}, headers=auth_headers).status_code == 404


def test_feedback_unavailable_without_llm(client, auth_headers):
    resp = client.post(
        "/api/practice/feedback", json={"story_content": "story", "user_delivery": "delivery"}, headers=auth_headers
    )
    feedback = resp.get_json()["feedback"]
    assert feedback["available"] is False
    assert feedback["rating"] is None


def test_feedback_is_saved_on_session(client, auth_headers, story, llm):
    session = client.post("/api/practice/sessions", json={"story_id": story["id"]}, headers=auth_headers)
    session_id = session.get_json()["session"]["id"]
    reply = {"feedback": "Nice pacing", "strengths": ["timing"], "improvements": [], "rating": 12}
    with patch.object(llm, "complete_json", return_value=reply):
        resp = client.post(
            "/api/practice/feedback",
            json={"story_content": "story", "user_delivery": "delivery", "session_id": session_id},
            headers=auth_headers,
        )
    assert resp.get_json()["feedback"]["rating"] == 10

    saved = client.get(f"/api/practice/sessions/{session_id}", headers=auth_headers).get_json()["session"]
    assert saved["feedback"] == "Nice pacing"
    assert saved["rating"] == 10
    stats = client.get("/api/practice/stats", headers=auth_headers).get_json()["stats"]
    assert stats["avg_rating"] == 10
