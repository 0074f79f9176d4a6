"""Journal services."""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from lifebook.core import records
from lifebook.core.llm import get_llm
from lifebook.domains.journal.schemas.journal_schemas import JournalEntryCreate, JournalEntryUpdate

logger = logging.getLogger(__name__)

ENTITY = "journal_entries"
LABEL = "journal_entry"

_INSIGHTS_SYSTEM = "You are a warm, practical reflective-writing coach."
_INSIGHTS_PROMPT = """Read this journal entry and reply with JSON:
{{"themes": [..], "emotions": [..], "people_mentioned": [..], "reflection_questions": [..], "summary": "..."}}

Entry (mood: {mood}):
\"\"\"
{content}
\"\"\"
"""


def _date_filters(date_from: Optional[date], date_to: Optional[date], mood: Optional[str]) -> dict:
    filters: dict = {}
    if date_from:
        filters["created_at__gte"] = datetime.combine(date_from, time.min)
    if date_to:
        # Inclusive of the whole end day.
        filters["created_at__lt"] = datetime.combine(date_to + timedelta(days=1), time.min)
    if mood:
        filters["mood"] = mood.strip().lower()
    return filters


def list_entries(
    user_id: int,
    *,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    mood: Optional[str] = None,
    page: int = 1,
    per_page: int = 20,
) -> tuple[list[dict], int]:
    return records.page_owned(
        ENTITY, user_id, page, per_page, filters=_date_filters(date_from, date_to, mood)
    )


def get_entry(user_id: int, entry_id: int) -> dict:
    return records.get_owned(ENTITY, user_id, entry_id, label=LABEL)


def create_entry(user_id: int, data: JournalEntryCreate) -> dict:
    entry = records.create_owned(ENTITY, user_id, data.model_dump())
    logger.info("Created journal entry %s for user %s", entry["id"], user_id)
    return entry


def update_entry(user_id: int, entry_id: int, data: JournalEntryUpdate) -> dict:
    changes = data.model_dump(exclude_unset=True)
    if "content" in changes and not changes["content"]:
        changes.pop("content")
    return records.update_owned(ENTITY, user_id, entry_id, changes, label=LABEL)


def delete_entry(user_id: int, entry_id: int) -> None:
    records.delete_owned(ENTITY, user_id, entry_id, label=LABEL)


def generate_insights(user_id: int, entry_id: int) -> dict:
    """LLM reading of one entry; empty lists when the model is unavailable."""
    entry = get_entry(user_id, entry_id)
    fallback = {
        "themes": [],
        "emotions": [],
        "people_mentioned": [],
        "reflection_questions": [],
        "summary": "",
        "available": False,
    }
    result = get_llm().complete_json(
        _INSIGHTS_PROMPT.format(mood=entry.get("mood") or "unspecified", content=entry["content"]),
        system=_INSIGHTS_SYSTEM,
        fallback=None,
    )
    if not isinstance(result, dict):
        return fallback
    return {**fallback, **result, "available": True}
