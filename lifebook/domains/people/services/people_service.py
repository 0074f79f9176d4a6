"""People services and the per-person sub-collections."""

from __future__ import annotations

import logging
from typing import Optional

from werkzeug.datastructures import FileStorage

from lifebook.core import records, uploads
from lifebook.core.errors import NotFound, StorageError, ValidationFailed
from lifebook.core.llm import get_llm
from lifebook.core.storage.json_text import decode_list
from lifebook.domains.people.schemas.people_schemas import (
    InsideJokeCreate,
    PersonCreate,
    PersonInsights,
    PersonUpdate,
)

logger = logging.getLogger(__name__)

ENTITY = "people"
LABEL = "person"
UPLOAD_SUBDIR = "people"

_RECOMMEND_PROMPT = """Recommend 3-5 of my stories that this person would enjoy most.

Person:
- Name: {name}
- Relationship: {relationship}
- How we met: {how_met}
- Interests: {interests}
- Personality traits: {traits}
- Conversation style: {style}
- Shared experiences: {shared}
- Story preferences: {preferences}
- Notes: {notes}

Stories:
{stories}

Reply with JSON:
{{"recommendations": [{{"story_id": 1, "title": "...", "reason": "...", "connection": "...", "conversation_starter": "..."}}]}}
"""

_ANALYZE_PROMPT = """Find the people mentioned in this journal entry (by name or by description such as
"my colleague") and what the entry shows about them.

Journal entry:
\"\"\"
{content}
\"\"\"

People I already track:
{people}

When someone matches a tracked person by name, set "existing_person_id" to that id, otherwise null.
Be conservative: only include insights the entry clearly supports.

Reply with JSON:
{{"people_insights": [{{"person_name": "...", "existing_person_id": null, "confidence": 0.8,
  "new_insights": {{"interests": [..], "personality_traits": [..], "conversation_style": "...",
                   "preferences": [..], "observations": "..."}}}}]}}
"""


def _joined(values) -> str:
    return ", ".join(values or []) or "Not specified"


def list_people(user_id: int, q: Optional[str] = None) -> list[dict]:
    people = records.list_owned(ENTITY, user_id)
    if q:
        needle = q.strip().lower()
        people = [person for person in people if needle in person["name"].lower()]
    return people


def get_person(user_id: int, person_id: int) -> dict:
    return records.get_owned(ENTITY, user_id, person_id, label=LABEL)


def person_detail(user_id: int, person_id: int) -> dict:
    person = get_person(user_id, person_id)
    scope = {"person_id": person_id}
    person["topics"] = records.list_owned("person_topics", user_id, filters=scope)
    person["inside_jokes"] = records.list_owned("person_inside_jokes", user_id, filters=scope)
    person["uploads"] = records.list_owned("person_text_uploads", user_id, filters=scope)
    links = records.list_owned("story_people", user_id, filters=scope)
    story_ids = [link["story_id"] for link in links]
    person["stories"] = records.list_owned("stories", user_id, filters={"id__in": story_ids}) if story_ids else []
    return person


def create_person(user_id: int, data: PersonCreate) -> dict:
    person = records.create_owned(ENTITY, user_id, data.model_dump())
    logger.info("Created person %s for user %s", person["id"], user_id)
    return person


def update_person(user_id: int, person_id: int, data: PersonUpdate) -> dict:
    return records.update_owned(ENTITY, user_id, person_id, data.model_dump(exclude_unset=True), label=LABEL)


def delete_person(user_id: int, person_id: int) -> None:
    stored = records.list_owned("person_text_uploads", user_id, filters={"person_id": person_id})
    records.delete_owned(ENTITY, user_id, person_id, label=LABEL)
    for upload in stored:
        uploads.remove_upload(UPLOAD_SUBDIR, upload["stored_name"])


# -- topics ------------------------------------------------------------------


def list_topics(user_id: int, person_id: int) -> list[dict]:
    get_person(user_id, person_id)
    return records.list_owned("person_topics", user_id, filters={"person_id": person_id})


def add_topic(user_id: int, person_id: int, topic: str) -> dict:
    get_person(user_id, person_id)
    return records.create_owned("person_topics", user_id, {"person_id": person_id, "topic": topic.strip()})


def _child(entity: str, user_id: int, person_id: int, child_id: int, label: str) -> dict:
    child = records.find_owned(entity, user_id, id=child_id, person_id=person_id)
    if child is None:
        raise NotFound(label)
    return child


def set_topic_used(user_id: int, person_id: int, topic_id: int, is_used: bool) -> dict:
    _child("person_topics", user_id, person_id, topic_id, "topic")
    return records.update_owned("person_topics", user_id, topic_id, {"is_used": is_used}, label="topic")


def delete_topic(user_id: int, person_id: int, topic_id: int) -> None:
    _child("person_topics", user_id, person_id, topic_id, "topic")
    records.delete_owned("person_topics", user_id, topic_id, label="topic")


# -- inside jokes ------------------------------------------------------------


def list_inside_jokes(user_id: int, person_id: int) -> list[dict]:
    get_person(user_id, person_id)
    return records.list_owned("person_inside_jokes", user_id, filters={"person_id": person_id})


def add_inside_joke(user_id: int, person_id: int, data: InsideJokeCreate) -> dict:
    get_person(user_id, person_id)
    return records.create_owned("person_inside_jokes", user_id, {**data.model_dump(), "person_id": person_id})


def delete_inside_joke(user_id: int, person_id: int, joke_id: int) -> None:
    _child("person_inside_jokes", user_id, person_id, joke_id, "inside_joke")
    records.delete_owned("person_inside_jokes", user_id, joke_id, label="inside_joke")


# -- text uploads ------------------------------------------------------------


def list_uploads(user_id: int, person_id: int) -> list[dict]:
    get_person(user_id, person_id)
    return records.list_owned("person_text_uploads", user_id, filters={"person_id": person_id})


def add_upload(user_id: int, person_id: int, file_storage: Optional[FileStorage]) -> dict:
    get_person(user_id, person_id)
    stored = uploads.save_upload(file_storage, UPLOAD_SUBDIR)
    try:
        return records.create_owned(
            "person_text_uploads", user_id, {**stored.metadata(), "person_id": person_id}
        )
    except StorageError:
        uploads.remove_upload(UPLOAD_SUBDIR, stored.stored_name)
        raise


def delete_upload(user_id: int, person_id: int, upload_id: int) -> None:
    upload = _child("person_text_uploads", user_id, person_id, upload_id, "upload")
    records.delete_owned("person_text_uploads", user_id, upload_id, label="upload")
    uploads.remove_upload(UPLOAD_SUBDIR, upload["stored_name"])


# -- stories -----------------------------------------------------------------


def story_recommendations(user_id: int, person_id: int) -> list[dict]:
    person = get_person(user_id, person_id)
    stories = records.list_owned("stories", user_id, limit=40)
    if not stories:
        return []
    listing = "\n".join(
        f"{story['id']}. {story['title']} ({story['tone']}): {story['content'][:400]}" for story in stories
    )
    result = get_llm().complete_json(
        _RECOMMEND_PROMPT.format(
            name=person["name"],
            relationship=person.get("relationship") or "Not specified",
            how_met=person.get("how_met") or "Not specified",
            interests=_joined(person.get("interests")),
            traits=_joined(person.get("personality_traits")),
            style=person.get("conversation_style") or "Not specified",
            shared=_joined(person.get("shared_experiences")),
            preferences=_joined(person.get("story_preferences")),
            notes=person.get("notes") or "None",
            stories=listing,
        ),
        fallback={"recommendations": []},
        max_tokens=1500,
    )
    recommendations = result.get("recommendations") if isinstance(result, dict) else None
    known = {story["id"] for story in stories}
    return [
        item
        for item in recommendations or []
        if isinstance(item, dict) and item.get("story_id") in known
    ]


# -- journal insights --------------------------------------------------------


def _text(value, limit: Optional[int] = None) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()[:limit] if limit else value.strip()


def _strings(value) -> list[str]:
    return [item.strip() for item in decode_list(value) if isinstance(item, str) and item.strip()]


def _insight_entry(item: dict, known: dict) -> Optional[dict]:
    name = _text(item.get("person_name"))
    if name is None:
        return None
    person_id = item.get("existing_person_id")
    person = known.get(person_id) if type(person_id) is int else None
    raw = item.get("new_insights") if isinstance(item.get("new_insights"), dict) else {}
    confidence = item.get("confidence")
    return {
        "person_name": name,
        "is_existing_person": person is not None,
        "existing_person_id": person["id"] if person else None,
        "new_insights": PersonInsights(
            interests=_strings(raw.get("interests")),
            personality_traits=_strings(raw.get("personality_traits")),
            preferences=_strings(raw.get("preferences")),
            conversation_style=_text(raw.get("conversation_style"), 64),
            observations=_text(raw.get("observations")),
        ).model_dump(),
        "confidence": confidence if type(confidence) in (int, float) else None,
    }


def analyze_journal(user_id: int, content: Optional[str] = None, journal_entry_id: Optional[int] = None) -> list:
    """Profile suggestions for people mentioned in a journal entry.

    ``existing_person_id`` only ever names one of the caller's own people;
    anything else the model returns is reported as a new person. An
    unavailable model yields an empty list.
    """
    text = (content or "").strip()
    if not text and journal_entry_id is not None:
        text = records.get_owned("journal_entries", user_id, journal_entry_id, label="journal_entry")["content"]
    if not text:
        raise ValidationFailed("content", "Journal content is required")
    people = list_people(user_id)
    listing = "\n".join(f"- ID: {person['id']}, Name: {person['name']}" for person in people) or "None yet"
    result = get_llm().complete_json(
        _ANALYZE_PROMPT.format(content=text, people=listing),
        fallback={"people_insights": []},
        temperature=0.3,
        max_tokens=2000,
    )
    items = result.get("people_insights") if isinstance(result, dict) else None
    known = {person["id"]: person for person in people}
    insights = [_insight_entry(item, known) for item in items or [] if isinstance(item, dict)]
    return [insight for insight in insights if insight is not None]


def _merged(current, extra) -> list:
    merged = list(current or [])
    merged.extend(value for value in extra if value not in merged)
    return merged


def apply_insights(user_id: int, person_id: int, insights: PersonInsights) -> dict:
    """Merge suggested insights into a person's profile; lists keep their order and stay unique."""
    person = get_person(user_id, person_id)
    changes = {
        "interests": _merged(person.get("interests"), insights.interests),
        "personality_traits": _merged(person.get("personality_traits"), insights.personality_traits),
        "story_preferences": _merged(person.get("story_preferences"), insights.preferences),
    }
    if insights.conversation_style:
        changes["conversation_style"] = insights.conversation_style
    if insights.observations:
        notes = person.get("notes") or ""
        changes["notes"] = f"{notes}\n\n{insights.observations}" if notes else insights.observations
    return records.update_owned(ENTITY, user_id, person_id, changes, label=LABEL)
