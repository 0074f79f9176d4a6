"""Story services: CRUD, LLM extraction and refinement, people tags."""

from __future__ import annotations

import logging
from typing import Optional

from lifebook.core import records
from lifebook.core.llm import get_llm
from lifebook.domains.stories.schemas.story_schemas import StoryCreate, StoryRefine, StoryUpdate

logger = logging.getLogger(__name__)

ENTITY = "stories"
LABEL = "story"

_EXTRACT_PROMPT = """You extract potential conversation stories from journal entries.
Look for anecdotes, observations or moments that could become an engaging
30-60 second story in a social conversation. Identify 1-3 of them.

For each story give a 2-4 word title, the core event in 1-2 sentences, the
emotional tone (funny, thoughtful, surprising, relatable...) and why others
would find it interesting. Reply with JSON:
{{"stories": [{{"title": "...", "core_event": "...", "tone": "...", "interest_reason": "..."}}]}}
If nothing is story-worthy reply {{"stories": []}}.

Journal entry:
\"\"\"
{content}
\"\"\"
"""

_REFINE_PROMPT = """Rewrite this story so it can be told casually at a bar or pub.
Tone: {tone}; conversational, natural and confident.
Length: about {duration} seconds spoken aloud (roughly {words} words).
Keep it light, avoid long exposition and heavy topics, and end on a clever or
ironic beat if one fits.

Preferences to honor:
\"\"\"
{notes}
\"\"\"

Original story:
\"\"\"
{content}
\"\"\"

Return only the rewritten story text.
"""

_STARTERS_PROMPT = """Based on this story, write 3-5 open-ended conversation starter
questions that could naturally lead to sharing it, or to hearing about similar
experiences, in a casual social setting. Reply with JSON: {{"questions": ["..."]}}

Story:
\"\"\"
{content}
\"\"\"
"""


def list_stories(
    user_id: int, *, tone: Optional[str] = None, page: int = 1, per_page: int = 20
) -> tuple[list[dict], int]:
    filters = {"tone": tone} if tone else None
    return records.page_owned(ENTITY, user_id, page, per_page, filters=filters)


def get_story(user_id: int, story_id: int) -> dict:
    story = records.get_owned(ENTITY, user_id, story_id, label=LABEL)
    story["people"] = people_for_story(user_id, story_id)
    return story


def create_story(user_id: int, data: StoryCreate) -> dict:
    if data.journal_entry_id is not None:
        records.get_owned("journal_entries", user_id, data.journal_entry_id, label="journal_entry")
    story = records.create_owned(ENTITY, user_id, data.model_dump())
    logger.info("Created story %s for user %s", story["id"], user_id)
    return story


def update_story(user_id: int, story_id: int, data: StoryUpdate) -> dict:
    return records.update_owned(ENTITY, user_id, story_id, data.model_dump(exclude_unset=True), label=LABEL)


def delete_story(user_id: int, story_id: int) -> None:
    records.delete_owned(ENTITY, user_id, story_id, label=LABEL)


def mark_told(user_id: int, story_id: int, success_rating: Optional[int] = None) -> dict:
    story = records.get_owned(ENTITY, user_id, story_id, label=LABEL)
    changes: dict = {"times_told": int(story.get("times_told") or 0) + 1}
    if success_rating is not None:
        changes["success_rating"] = success_rating
    return records.update_owned(ENTITY, user_id, story_id, changes, label=LABEL)


def extract_from_journal(user_id: int, journal_id: int) -> list[dict]:
    """Candidate stories the LLM found in one journal entry; nothing is saved."""
    entry = records.get_owned("journal_entries", user_id, journal_id, label="journal_entry")
    result = get_llm().complete_json(
        _EXTRACT_PROMPT.format(content=entry["content"]), fallback={"stories": []}, temperature=0.7
    )
    stories = result.get("stories") if isinstance(result, dict) else None
    if not isinstance(stories, list):
        return []
    return [
        {
            "title": str(item.get("title") or "").strip(),
            "core_event": str(item.get("core_event") or "").strip(),
            "tone": str(item.get("tone") or "casual").strip(),
            "interest_reason": str(item.get("interest_reason") or "").strip(),
            "journal_entry_id": journal_id,
        }
        for item in stories
        if isinstance(item, dict) and item.get("title")
    ]


def refine_story(user_id: int, story_id: int, data: StoryRefine) -> dict:
    """Rewrite the story with the LLM; the original text is kept when it fails."""
    story = records.get_owned(ENTITY, user_id, story_id, label=LABEL)
    refined = get_llm().complete(
        _REFINE_PROMPT.format(
            tone=data.tone,
            duration=data.duration,
            words=int(data.duration * 2.5),
            notes=data.notes,
            content=story["content"],
        ),
        fallback=story["content"],
        temperature=0.9,
        max_tokens=400,
    )
    return records.update_owned(
        ENTITY,
        user_id,
        story_id,
        {"content": refined, "tone": data.tone, "duration_seconds": data.duration},
        label=LABEL,
    )


def generate_starters(user_id: int, story_id: int) -> list[dict]:
    story = records.get_owned(ENTITY, user_id, story_id, label=LABEL)
    result = get_llm().complete_json(_STARTERS_PROMPT.format(content=story["content"]), fallback={})
    questions = result.get("questions") if isinstance(result, dict) else None
    saved = []
    for question in questions or []:
        text = str(question).strip()
        if not text:
            continue
        saved.append(
            records.create_owned(
                "conversation_starters",
                user_id,
                {"story_id": story_id, "question": text, "context": story["title"]},
            )
        )
    return saved


# -- people tags -------------------------------------------------------------


def people_for_story(user_id: int, story_id: int) -> list[dict]:
    links = records.list_owned("story_people", user_id, filters={"story_id": story_id})
    if not links:
        return []
    person_ids = [link["person_id"] for link in links]
    return records.list_owned("people", user_id, filters={"id__in": person_ids})


def tag_person(user_id: int, story_id: int, person_id: int) -> dict:
    records.get_owned(ENTITY, user_id, story_id, label=LABEL)
    records.get_owned("people", user_id, person_id, label="person")
    return records.upsert_owned(
        "story_people",
        user_id,
        {"story_id": story_id, "person_id": person_id},
        conflict_keys=("story_id", "person_id"),
    )


def untag_person(user_id: int, story_id: int, person_id: int) -> None:
    link = records.find_owned("story_people", user_id, story_id=story_id, person_id=person_id)
    if link is None:
        records.get_owned(ENTITY, user_id, story_id, label=LABEL)
        records.get_owned("people", user_id, person_id, label="person")
        return
    records.delete_owned("story_people", user_id, link["id"], label="story_person")
