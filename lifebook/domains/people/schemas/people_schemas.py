"""People request schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from lifebook.core.storage.json_text import decode_list

_LIST_FIELDS = ("interests", "personality_traits", "shared_experiences", "story_preferences")


class PersonCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    relationship: Optional[str] = Field(default=None, max_length=128)
    how_met: Optional[str] = None
    interests: List[str] = Field(default_factory=list)
    personality_traits: List[str] = Field(default_factory=list)
    conversation_style: Optional[str] = Field(default=None, max_length=64)
    shared_experiences: List[str] = Field(default_factory=list)
    story_preferences: List[str] = Field(default_factory=list)
    notes: Optional[str] = None

    @field_validator(*_LIST_FIELDS, mode="before")
    @classmethod
    def coerce_lists(cls, v):
        return decode_list(v)


class PersonUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    relationship: Optional[str] = Field(default=None, max_length=128)
    how_met: Optional[str] = None
    interests: Optional[List[str]] = None
    personality_traits: Optional[List[str]] = None
    conversation_style: Optional[str] = Field(default=None, max_length=64)
    shared_experiences: Optional[List[str]] = None
    story_preferences: Optional[List[str]] = None
    notes: Optional[str] = None

    @field_validator(*_LIST_FIELDS, mode="before")
    @classmethod
    def coerce_lists(cls, v):
        return None if v is None else decode_list(v)


class PersonListFilter(BaseModel):
    q: Optional[str] = None


class TopicCreate(BaseModel):
    topic: str = Field(min_length=1)


class TopicUpdate(BaseModel):
    is_used: bool


class InsideJokeCreate(BaseModel):
    content: str = Field(min_length=1)
    context: Optional[str] = None


class JournalAnalysisRequest(BaseModel):
    content: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("content", "journal_content", "journalContent")
    )
    journal_entry_id: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("journal_entry_id", "journalEntryId")
    )


class PersonInsights(BaseModel):
    interests: List[str] = Field(default_factory=list)
    personality_traits: List[str] = Field(default_factory=list)
    preferences: List[str] = Field(default_factory=list)
    conversation_style: Optional[str] = Field(default=None, max_length=64)
    observations: Optional[str] = None

    @field_validator("interests", "personality_traits", "preferences", mode="before")
    @classmethod
    def coerce_lists(cls, v):
        return decode_list(v)


class ApplyInsightsRequest(BaseModel):
    insights: PersonInsights
