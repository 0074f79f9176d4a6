"""CBT-style coaching: scan journal entries for recurring issues and track them."""

from __future__ import annotations

import logging
from typing import Any, Optional

from lifebook.core import records
from lifebook.core.errors import ValidationFailed
from lifebook.core.llm import get_llm
from lifebook.domains.coach.schemas.coach_schemas import CoachIssueUpdate
from lifebook.domains.journal.services import journal_service

logger = logging.getLogger(__name__)

ENTITY = "coach_issues"
LABEL = "coach_issue"

_SCAN_SYSTEM = "You are a careful, supportive CBT coach. You never diagnose."
_SCAN_PROMPT = """Analyze this journal entry and extract issues suitable for CBT/ACT-style coaching.

Reply with strict JSON:
{{"issues": [{{
  "theme": "social anxiety | self-criticism | procrastination | ...",
  "cognitive_distortions": ["mind-reading", "catastrophizing"],
  "severity": 0-10,
  "confidence": 0-1,
  "span_text": "direct quote",
  "span_start": 0,
  "span_end": 0,
  "goal": "the writer's desired outcome in their own words, if evident",
  "suggested_techniques": ["thought_record", "socratic_questioning", "behavioral_activation", "reframing"],
  "tags": ["..."]
}}]}}

Journal entry:
\"\"\"
{content}
\"\"\"
"""


def _text(value: Any, limit: Optional[int] = None) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()[:limit] if limit else value.strip()


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _number(value: Any, cast, low, high):
    if isinstance(value, bool):
        return None
    try:
        number = cast(value)
    except (TypeError, ValueError):
        return None
    return min(max(number, low), high)


def _issue_payload(issue: dict, journal_entry_id: int) -> dict:
    """Map one model-reported issue onto ``coach_issues`` columns."""
    return {
        "journal_entry_id": journal_entry_id,
        "theme": _text(issue.get("theme"), 255),
        "distortions": _strings(issue.get("cognitive_distortions")),
        "severity": _number(issue.get("severity"), int, 0, 10),
        "confidence": _number(issue.get("confidence"), float, 0.0, 1.0),
        "span_text": _text(issue.get("span_text")),
        "span_start": _number(issue.get("span_start"), int, 0, 1_000_000),
        "span_end": _number(issue.get("span_end"), int, 0, 1_000_000),
        "goal": _text(issue.get("goal")),
        "techniques": _strings(issue.get("suggested_techniques")),
        "tags": _strings(issue.get("tags")),
        "status": "open",
    }


def scan_journal(user_id: int, journal_entry_id: int, content: Optional[str] = None) -> list[dict]:
    """Store the issues the model finds in one entry; nothing is stored when it is unavailable."""
    entry = journal_service.get_entry(user_id, journal_entry_id)
    text = (content or "").strip() or entry["content"]
    result = get_llm().complete_json(
        _SCAN_PROMPT.format(content=text),
        system=_SCAN_SYSTEM,
        fallback={"issues": []},
        temperature=0.3,
        max_tokens=900,
    )
    issues = result.get("issues") if isinstance(result, dict) else None
    created = [
        records.create_owned(ENTITY, user_id, _issue_payload(issue, entry["id"]))
        for issue in issues or []
        if isinstance(issue, dict)
    ]
    logger.info("Coach scan of journal entry %s stored %s issues", entry["id"], len(created))
    return created


def list_issues(user_id: int, status: Optional[str] = None) -> list[dict]:
    filters = {"status": status} if status else None
    return records.list_owned(ENTITY, user_id, filters=filters)


def update_issue(user_id: int, issue_id: int, data: CoachIssueUpdate) -> dict:
    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise ValidationFailed("status", "Provide status or severity")
    return records.update_owned(ENTITY, user_id, issue_id, changes, label=LABEL)
