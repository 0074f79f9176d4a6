"""Request schemas for the self-development records."""

from __future__ import annotations

import datetime as dt
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from lifebook.core.storage.json_text import decode_list, decode_object
from lifebook.core.utils.dates import parse_date

GoalStatus = Literal["active", "paused", "done", "dropped"]


def _optional_list(v):
    return None if v is None else decode_list(v)


class GoalCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    area: Optional[str] = Field(default=None, max_length=64)
    target_date: Optional[dt.date] = None
    status: GoalStatus = "active"

    @field_validator("target_date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        return parse_date(v)


class GoalUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    area: Optional[str] = Field(default=None, max_length=64)
    target_date: Optional[dt.date] = None
    status: Optional[GoalStatus] = None

    @field_validator("target_date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        return parse_date(v)


class BeliefCreate(BaseModel):
    current_belief: str = Field(min_length=1)
    desired_belief: Optional[str] = None
    change_plan: Optional[str] = None


class BeliefUpdate(BaseModel):
    current_belief: Optional[str] = Field(default=None, min_length=1)
    desired_belief: Optional[str] = None
    change_plan: Optional[str] = None


class TriggerCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    category: Optional[str] = Field(default=None, max_length=64)
    intensity: Optional[int] = Field(default=None, ge=1, le=10)
    notes: Optional[str] = None


class TriggerUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[str] = Field(default=None, max_length=64)
    intensity: Optional[int] = Field(default=None, ge=1, le=10)
    notes: Optional[str] = None


class ProtocolCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    when_to_use: Optional[str] = None
    steps: List[str] = Field(default_factory=list)
    cadence: Optional[str] = Field(default=None, max_length=64)

    @field_validator("steps", mode="before")
    @classmethod
    def coerce_steps(cls, v):
        return decode_list(v)


class ProtocolUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    when_to_use: Optional[str] = None
    steps: Optional[List[str]] = None
    cadence: Optional[str] = Field(default=None, max_length=64)

    @field_validator("steps", mode="before")
    @classmethod
    def coerce_steps(cls, v):
        return _optional_list(v)


class IdentitySave(BaseModel):
    vision: str = ""
    core_values: List[str] = Field(default_factory=list)
    principles: List[str] = Field(default_factory=list)

    @field_validator("core_values", "principles", mode="before")
    @classmethod
    def coerce_lists(cls, v):
        return decode_list(v)


class DatingProfileSave(BaseModel):
    partner_vision: str = ""
    must_haves: List[str] = Field(default_factory=list)
    nice_to_haves: List[str] = Field(default_factory=list)
    red_flags: List[str] = Field(default_factory=list)
    self_reflection_answers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("must_haves", "nice_to_haves", "red_flags", mode="before")
    @classmethod
    def coerce_lists(cls, v):
        return decode_list(v)

    @field_validator("self_reflection_answers", mode="before")
    @classmethod
    def coerce_answers(cls, v):
        return {str(key): "" if value is None else str(value) for key, value in decode_object(v).items()}
