"""AI chat with a rolling per-conversation summary used as memory.

Replies degrade to a fixed message when the LLM is unavailable; the user's
message and the reply are stored either way.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from flask import current_app

from lifebook.core import records
from lifebook.core.errors import StorageError
from lifebook.core.llm import get_llm
from lifebook.domains.chat.schemas.chat_schemas import ChatMessageRequest

logger = logging.getLogger(__name__)

CONVERSATIONS = "ai_conversations"
MESSAGES = "ai_messages"
LABEL = "conversation"

HISTORY_LIMIT = 24
MEMORY_LIMIT = 8
UNAVAILABLE_REPLY = "The AI service is temporarily unavailable. Please try again in a minute."

_SYSTEM = (
    "You are a helpful, friendly AI chat assistant. Be conversational, ask clarifying "
    "questions when needed, and keep responses grounded and practical.{memory}\n"
    "Use the saved chat memory as background when it is relevant. Do not invent details "
    "the memory does not state."
)

_SUMMARY_PROMPT = """Summarize this conversation for future reference in a personal AI chat assistant.
Return at most 8 compact bullet points covering what the user was thinking or feeling,
key facts and preferences, and any decisions or next steps.

Conversation:
{transcript}

Return only the bullet points."""

_WS = re.compile(r"\s+")


def make_title(message: str) -> str:
    text = _WS.sub(" ", message or "").strip()
    if not text:
        return "New chat"
    return f"{text[:57]}…" if len(text) > 60 else text


def fallback_summary(messages: list[dict]) -> Optional[str]:
    """Plain digest of the user's turns, used when the LLM cannot summarize."""
    text = "\n".join(m["content"] for m in messages if m["role"] == "user").strip()
    if not text:
        return None
    text = f"{text[:397]}…" if len(text) > 400 else text
    return "User topics:\n- " + re.sub(r"\n+", "\n- ", text)


def _chat_model() -> str:
    return current_app.config.get("OPENAI_CHAT_MODEL") or get_llm().model


def list_conversations(user_id: int) -> list[dict]:
    return records.list_owned(CONVERSATIONS, user_id, limit=200)


def list_messages(user_id: int, conversation_id: int) -> list[dict]:
    records.get_owned(CONVERSATIONS, user_id, conversation_id, label=LABEL)
    return records.list_owned(MESSAGES, user_id, filters={"conversation_id": conversation_id}, limit=500)


def delete_conversation(user_id: int, conversation_id: int) -> None:
    records.delete_owned(CONVERSATIONS, user_id, conversation_id, label=LABEL)


def _recent(user_id: int, conversation_id: int) -> list[dict]:
    rows = records.list_owned(
        MESSAGES,
        user_id,
        filters={"conversation_id": conversation_id},
        order_by=("-id",),
        limit=HISTORY_LIMIT,
    )
    return [{"role": row["role"], "content": row["content"]} for row in reversed(rows)]


def _memory(user_id: int, conversation_id: int) -> list[str]:
    others = records.list_owned(
        CONVERSATIONS,
        user_id,
        filters={"id__ne": conversation_id, "summary__ne": None},
        limit=MEMORY_LIMIT,
    )
    return [row["summary"] for row in others if (row.get("summary") or "").strip()]


def _reply(memory: list[str], history: list[dict]) -> str:
    block = ""
    if memory:
        lines = "\n".join(f"({index}) {summary}" for index, summary in enumerate(memory, start=1))
        block = f"\n\nSaved chat memory (summaries of the user's prior chats):\n{lines}\n"
    messages = [{"role": "system", "content": _SYSTEM.format(memory=block)}, *history]
    return get_llm().chat(
        messages, fallback=UNAVAILABLE_REPLY, temperature=0.7, max_tokens=650, model=_chat_model()
    )


def _refresh_summary(user_id: int, conversation_id: int) -> None:
    history = _recent(user_id, conversation_id)
    transcript = "\n\n".join(f"{m['role'].upper()}: {m['content']}" for m in history)
    summary = get_llm().complete(
        _SUMMARY_PROMPT.format(transcript=transcript),
        fallback=fallback_summary(history) or "",
        temperature=0.3,
        max_tokens=260,
        model=_chat_model(),
    )
    if not summary:
        return
    try:
        records.update_owned(CONVERSATIONS, user_id, conversation_id, {"summary": summary}, label=LABEL)
    except StorageError as exc:
        logger.warning("Chat summary for conversation %s not saved: %s", conversation_id, exc)


def send_message(user_id: int, data: ChatMessageRequest) -> dict:
    if data.conversation_id is not None:
        conversation = records.get_owned(CONVERSATIONS, user_id, data.conversation_id, label=LABEL)
    else:
        conversation = records.create_owned(CONVERSATIONS, user_id, {"title": make_title(data.message)})
    conversation_id = conversation["id"]

    records.create_owned(
        MESSAGES, user_id, {"conversation_id": conversation_id, "role": "user", "content": data.message}
    )
    memory = _memory(user_id, conversation_id) if data.use_memory else []
    reply = _reply(memory, _recent(user_id, conversation_id))
    records.create_owned(
        MESSAGES, user_id, {"conversation_id": conversation_id, "role": "assistant", "content": reply}
    )
    # Touch updated_at so the conversation sorts first.
    records.update_owned(
        CONVERSATIONS, user_id, conversation_id, {"title": conversation.get("title") or make_title(data.message)}
    )
    _refresh_summary(user_id, conversation_id)
    return {"conversation_id": conversation_id, "assistant": reply}
