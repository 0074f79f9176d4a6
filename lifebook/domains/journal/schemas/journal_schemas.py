"""Journal request schemas."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from lifebook.core.storage.json_text import decode_list


class JournalEntryCreate(BaseModel):
    content: str = Field(min_length=1)
    mood: Optional[str] = Field(default=None, max_length=32)
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v):
        return decode_list(v)

    @field_validator("mood")
    @classmethod
    def normalize_mood(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() or None if v else None


class JournalEntryUpdate(BaseModel):
    content: Optional[str] = Field(default=None, min_length=1)
    mood: Optional[str] = Field(default=None, max_length=32)
    tags: Optional[List[str]] = None

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v):
        return None if v is None else decode_list(v)

    @field_validator("mood")
    @classmethod
    def normalize_mood(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() or None if v else None


class JournalEntryListFilter(BaseModel):
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    mood: Optional[str] = None
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=20, ge=1, le=100)
