"""Story and practice request schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from lifebook.core.storage.json_text import decode_list


class StoryCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    journal_entry_id: Optional[int] = None
    tone: str = Field(default="casual", max_length=64)
    duration_seconds: int = Field(default=30, ge=5, le=600)
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v):
        return decode_list(v)


class StoryUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)
    tone: Optional[str] = Field(default=None, max_length=64)
    duration_seconds: Optional[int] = Field(default=None, ge=5, le=600)
    tags: Optional[List[str]] = None
    times_told: Optional[int] = Field(default=None, ge=0)
    success_rating: Optional[int] = Field(default=None, ge=1, le=10)

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v):
        return None if v is None else decode_list(v)


class StoryRefine(BaseModel):
    tone: str = Field(default="casual", max_length=64)
    duration: int = Field(default=30, ge=5, le=600)
    notes: str = ""


class StoryTold(BaseModel):
    success_rating: Optional[int] = Field(default=None, ge=1, le=10)


class StoryPersonLink(BaseModel):
    person_id: int = Field(gt=0)


class StoryListFilter(BaseModel):
    tone: Optional[str] = None
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=20, ge=1, le=100)


class PracticeSessionCreate(BaseModel):
    story_id: Optional[int] = None
    session_type: str = Field(default="storytelling", max_length=64)


class PracticeFeedbackRequest(BaseModel):
    story_content: str = Field(min_length=1)
    user_delivery: str = Field(min_length=1)
    session_id: Optional[int] = None


class PracticeListFilter(BaseModel):
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=20, ge=1, le=100)


class StarterListFilter(BaseModel):
    story_id: Optional[int] = None
