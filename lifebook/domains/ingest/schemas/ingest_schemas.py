"""Ingest webhook payload."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lifebook.core.utils.dates import parse_date


class HealthEventPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    user_id: Optional[int] = None
    event_type: str = Field(default="daily_summary", max_length=64)
    event_date: Optional[dt.date] = None
    source: str = Field(default="apple_health_shortcut", max_length=64)

    @field_validator("event_date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        return parse_date(v)
