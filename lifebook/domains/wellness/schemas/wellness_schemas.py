"""Wellness request schemas."""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from lifebook.core.storage.json_text import decode_list
from lifebook.core.utils.dates import parse_date


def _as_list(value):
    # Clients send arrays, but older forms post comma-separated text.
    return decode_list(value)


class WellnessEntryUpsert(BaseModel):
    date: dt.date
    supplements: List[str] = Field(default_factory=list)
    medication: List[str] = Field(default_factory=list)
    diet_items: List[str] = Field(default_factory=list)
    diet_quality: Optional[int] = Field(default=None, ge=1, le=5)
    exercise_minutes: Optional[int] = Field(default=0, ge=0, le=24 * 60)
    exercise_intensity: Optional[int] = Field(default=None, ge=1, le=5)
    sleep_quality: Optional[int] = Field(default=None, ge=1, le=5)
    sleep_score: Optional[int] = Field(default=None, ge=0, le=100)
    weight_kg: Optional[float] = Field(default=None, gt=0)
    height_cm: Optional[float] = Field(default=None, gt=0)
    bmi: Optional[float] = Field(default=None, gt=0)
    body_fat_percent: Optional[float] = Field(default=None, ge=0, le=100)

    @field_validator("date", mode="before")
    @classmethod
    def parse_any_date(cls, v):
        return parse_date(v) if isinstance(v, str) else v

    @field_validator("supplements", "medication", "diet_items", mode="before")
    @classmethod
    def coerce_list(cls, v):
        return _as_list(v)


class WellnessPresetSave(BaseModel):
    supplements: List[str] = Field(default_factory=list)
    medication: List[str] = Field(default_factory=list)
    diet_items: List[str] = Field(default_factory=list)
    weight_kg: Optional[float] = Field(default=None, gt=0)
    height_cm: Optional[float] = Field(default=None, gt=0)
    bmi: Optional[float] = Field(default=None, gt=0)
    body_fat_percent: Optional[float] = Field(default=None, ge=0, le=100)

    @field_validator("supplements", "medication", "diet_items", mode="before")
    @classmethod
    def coerce_list(cls, v):
        return _as_list(v)


class WellnessListFilter(BaseModel):
    start: Optional[dt.date] = None
    end: Optional[dt.date] = None
    limit: int = Field(default=90, ge=1, le=366)
