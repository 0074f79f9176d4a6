"""Raw health events pushed by device exporters."""

from __future__ import annotations

import datetime as dt

from sqlalchemy.orm import Mapped, mapped_column

from lifebook.core.storage.column_types import JSONObject
from lifebook.core.storage.registry import register_entity
from lifebook.core.users.models import owner_fk
from lifebook.core.utils.dates import utcnow
from lifebook.extensions import db


class HealthIntakeEvent(db.Model):
    __tablename__ = "health_intake_events"
    __table_args__ = (db.Index("ix_health_intake_events_user_date", "user_id", "event_date"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    source: Mapped[str] = mapped_column(db.String(64), nullable=False)
    event_type: Mapped[str] = mapped_column(db.String(64), nullable=False)
    event_date: Mapped[dt.date | None] = mapped_column(db.Date)
    payload: Mapped[dict] = mapped_column(JSONObject, nullable=False, default=dict)
    created_at: Mapped[dt.datetime] = mapped_column(default=utcnow)


register_entity("health_intake_events", HealthIntakeEvent)
