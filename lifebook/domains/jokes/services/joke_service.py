"""Joke services."""

from __future__ import annotations

import logging
from typing import Optional

from lifebook.core import records
from lifebook.core.llm import get_llm
from lifebook.domains.jokes.schemas.joke_schemas import JokeCreate, JokeGenerate, JokeIterate, JokeUpdate

logger = logging.getLogger(__name__)

ENTITY = "jokes"
LABEL = "joke"

_WRITER_SYSTEM = "You are a professional comedy writer. Keep material original and suitable for general audiences."

_GENERATE_PROMPT = """Write a joke for this request: "{prompt}"
{context}
Make it easy to remember and tell. Reply with JSON:
{{"title": "...", "content": "...", "category": "pun|one-liner|story|observational|...", "difficulty": "easy|medium|hard", "explanation": "..."}}
"""

_ITERATE_PROMPT = """{history}Improve this joke: sharpen the timing and the punchline while keeping the concept.

Title: {title}
Content: {content}
Category: {category}
Difficulty: {difficulty}

Reply with JSON:
{{"improved_joke": {{"title": "...", "content": "...", "category": "...", "difficulty": "..."}}, "explanation": "...", "suggestions": ["..."]}}
"""


def list_jokes(user_id: int, category: Optional[str] = None) -> list[dict]:
    return records.list_owned(ENTITY, user_id, filters={"category": category} if category else None)


def get_joke(user_id: int, joke_id: int) -> dict:
    return records.get_owned(ENTITY, user_id, joke_id, label=LABEL)


def create_joke(user_id: int, data: JokeCreate) -> dict:
    joke = records.create_owned(ENTITY, user_id, data.model_dump())
    logger.info("Created joke %s for user %s", joke["id"], user_id)
    return joke


def update_joke(user_id: int, joke_id: int, data: JokeUpdate) -> dict:
    return records.update_owned(ENTITY, user_id, joke_id, data.model_dump(exclude_unset=True), label=LABEL)


def delete_joke(user_id: int, joke_id: int) -> None:
    records.delete_owned(ENTITY, user_id, joke_id, label=LABEL)


def mark_told(user_id: int, joke_id: int, success_rating: Optional[int] = None) -> dict:
    joke = get_joke(user_id, joke_id)
    changes: dict = {"times_told": int(joke.get("times_told") or 0) + 1}
    if success_rating is not None:
        changes["success_rating"] = success_rating
    return records.update_owned(ENTITY, user_id, joke_id, changes, label=LABEL)


def tag_person(user_id: int, joke_id: int, person_id: int) -> dict:
    get_joke(user_id, joke_id)
    records.get_owned("people", user_id, person_id, label="person")
    return records.upsert_owned(
        "joke_people",
        user_id,
        {"joke_id": joke_id, "person_id": person_id},
        conflict_keys=("joke_id", "person_id"),
    )


def untag_person(user_id: int, joke_id: int, person_id: int) -> None:
    link = records.find_owned("joke_people", user_id, joke_id=joke_id, person_id=person_id)
    if link is not None:
        records.delete_owned("joke_people", user_id, link["id"], label="joke_person")


def jokes_for_person(user_id: int, person_id: int) -> list[dict]:
    records.get_owned("people", user_id, person_id, label="person")
    links = records.list_owned("joke_people", user_id, filters={"person_id": person_id})
    if not links:
        return []
    return records.list_owned(ENTITY, user_id, filters={"id__in": [link["joke_id"] for link in links]})


def generate(user_id: int, data: JokeGenerate) -> Optional[dict]:
    """Draft a joke with the LLM. Nothing is saved; ``None`` when unavailable."""
    context = []
    if data.person_id is not None:
        person = records.get_owned("people", user_id, data.person_id, label="person")
        context.append(
            f"Tailor it to {person['name']} (interests: {', '.join(person.get('interests') or []) or 'unknown'}; "
            f"personality: {', '.join(person.get('personality_traits') or []) or 'unknown'}; "
            f"conversation style: {person.get('conversation_style') or 'unknown'})."
        )
    if data.category:
        context.append(f"Category: {data.category}")
    if data.difficulty:
        context.append(f"Difficulty: {data.difficulty}")
    result = get_llm().complete_json(
        _GENERATE_PROMPT.format(prompt=data.prompt, context="\n".join(context)),
        system=_WRITER_SYSTEM,
        fallback=None,
        temperature=0.8,
    )
    if not isinstance(result, dict) or not result.get("content"):
        return None
    return {
        "title": str(result.get("title") or data.prompt[:60]),
        "content": str(result["content"]),
        "category": result.get("category") or data.category,
        "difficulty": result.get("difficulty") or data.difficulty,
        "explanation": result.get("explanation") or "",
    }


def iterate(user_id: int, joke_id: int, data: JokeIterate) -> Optional[dict]:
    joke = get_joke(user_id, joke_id)
    history = ""
    if data.conversation_history:
        lines = "\n".join(f"{msg.role}: {msg.content}" for msg in data.conversation_history)
        history = f"Previous conversation:\n{lines}\n\n"
    result = get_llm().complete_json(
        _ITERATE_PROMPT.format(
            history=history,
            title=joke["title"],
            content=joke["content"],
            category=joke.get("category") or "general",
            difficulty=joke.get("difficulty") or "medium",
        ),
        system=_WRITER_SYSTEM,
        fallback=None,
        temperature=0.8,
    )
    if not isinstance(result, dict) or not isinstance(result.get("improved_joke"), dict):
        return None
    return {
        "improved_joke": result["improved_joke"],
        "explanation": result.get("explanation") or "",
        "suggestions": list(result.get("suggestions") or []),
    }
