"""Practice sessions and LLM feedback on a told story."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from lifebook.core import records
from lifebook.core.llm import get_llm
from lifebook.core.utils import dates
from lifebook.domains.stories.schemas.story_schemas import PracticeFeedbackRequest, PracticeSessionCreate

logger = logging.getLogger(__name__)

ENTITY = "practice_sessions"
LABEL = "practice_session"

_FEEDBACK_SYSTEM = "You are a supportive conversation coach."
_FEEDBACK_PROMPT = """A user is practising telling this story.

Original story:
\"\"\"
{story}
\"\"\"

Their delivery:
\"\"\"
{delivery}
\"\"\"

Give encouraging, specific feedback on clarity and flow, engagement, timing
and pacing, plus one or two concrete improvements. Reply with JSON:
{{"feedback": "...", "strengths": ["..."], "improvements": ["..."], "rating": 1-10}}
"""


def _with_story_titles(user_id: int, rows: list[dict]) -> list[dict]:
    story_ids = sorted({row["story_id"] for row in rows if row.get("story_id")})
    titles = {}
    if story_ids:
        stories = records.list_owned("stories", user_id, filters={"id__in": story_ids})
        titles = {story["id"]: story["title"] for story in stories}
    for row in rows:
        row["story_title"] = titles.get(row.get("story_id"))
    return rows


def list_sessions(user_id: int, *, page: int = 1, per_page: int = 20) -> tuple[list[dict], int]:
    sessions, total = records.page_owned(ENTITY, user_id, page, per_page)
    return _with_story_titles(user_id, sessions), total


def get_session(user_id: int, session_id: int) -> dict:
    session = records.get_owned(ENTITY, user_id, session_id, label=LABEL)
    return _with_story_titles(user_id, [session])[0]


def start_session(user_id: int, data: PracticeSessionCreate) -> dict:
    if data.story_id is not None:
        records.get_owned("stories", user_id, data.story_id, label="story")
    session = records.create_owned(ENTITY, user_id, data.model_dump())
    logger.info("Practice session %s started for user %s", session["id"], user_id)
    return session


def feedback(user_id: int, data: PracticeFeedbackRequest) -> dict:
    """Coach feedback; saved on the session when one is given."""
    result = get_llm().complete_json(
        _FEEDBACK_PROMPT.format(story=data.story_content, delivery=data.user_delivery),
        system=_FEEDBACK_SYSTEM,
        fallback=None,
        temperature=0.6,
        max_tokens=500,
    )
    if not isinstance(result, dict):
        return {
            "feedback": "Feedback is unavailable right now. Try telling it once more out loud.",
            "strengths": [],
            "improvements": [],
            "rating": None,
            "available": False,
        }
    rating = _rating(result.get("rating"))
    reply = {
        "feedback": str(result.get("feedback") or ""),
        "strengths": list(result.get("strengths") or []),
        "improvements": list(result.get("improvements") or []),
        "rating": rating,
        "available": True,
    }
    if data.session_id is not None:
        records.update_owned(
            ENTITY,
            user_id,
            data.session_id,
            {"feedback": reply["feedback"], "rating": rating},
            label=LABEL,
        )
    return reply


def _rating(value) -> Optional[int]:
    try:
        return max(1, min(10, int(value)))
    except (TypeError, ValueError):
        return None


def list_starters(user_id: int, story_id: Optional[int] = None) -> list[dict]:
    filters = {"story_id": story_id} if story_id is not None else None
    starters = records.list_owned("conversation_starters", user_id, filters=filters)
    return _with_story_titles(user_id, starters)


def stats(user_id: int) -> dict:
    sessions = records.list_owned(ENTITY, user_id)
    ratings = [row["rating"] for row in sessions if row.get("rating") is not None]
    week_ago = dates.utcnow() - timedelta(days=7)
    recent = records.count_owned(ENTITY, user_id, filters={"created_at__gte": week_ago})
    return {
        "total_sessions": len(sessions),
        "avg_rating": round(sum(ratings) / len(ratings), 2) if ratings else 0,
        "stories_practiced": len({row["story_id"] for row in sessions if row.get("story_id")}),
        "recent_sessions": recent,
    }