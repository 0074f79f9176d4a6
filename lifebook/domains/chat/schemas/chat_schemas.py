"""Chat request schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


class ChatMessageRequest(BaseModel):
    message: str = Field(min_length=1, max_length=8000)
    conversation_id: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("conversation_id", "conversationId")
    )
    use_memory: bool = Field(default=True, validation_alias=AliasChoices("use_memory", "useMemory"))

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v):
        return v.strip() if isinstance(v, str) else v
