"""Daily wellness log and the per-user preset used to prefill it."""

from __future__ import annotations

import datetime as dt

from sqlalchemy.orm import Mapped, mapped_column

from lifebook.core.storage.column_types import JSONList
from lifebook.core.storage.registry import register_entity
from lifebook.core.users.models import TimestampMixin, owner_fk
from lifebook.extensions import db


class WellnessEntry(db.Model, TimestampMixin):
    __tablename__ = "wellness_entries"
    __table_args__ = (
        db.UniqueConstraint("user_id", "date", name="uq_wellness_entries_user_date"),
        db.Index("ix_wellness_entries_user_date", "user_id", "date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    date: Mapped[dt.date] = mapped_column(db.Date, nullable=False)
    supplements: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    medication: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    diet_items: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    diet_quality: Mapped[int | None] = mapped_column(db.Integer)
    exercise_minutes: Mapped[int | None] = mapped_column(db.Integer)
    exercise_intensity: Mapped[int | None] = mapped_column(db.Integer)
    sleep_quality: Mapped[int | None] = mapped_column(db.Integer)
    sleep_score: Mapped[int | None] = mapped_column(db.Integer)
    weight_kg: Mapped[float | None] = mapped_column(db.Float)
    height_cm: Mapped[float | None] = mapped_column(db.Float)
    bmi: Mapped[float | None] = mapped_column(db.Float)
    body_fat_percent: Mapped[float | None] = mapped_column(db.Float)


class WellnessPreset(db.Model, TimestampMixin):
    __tablename__ = "wellness_presets"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    supplements: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    medication: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    diet_items: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    weight_kg: Mapped[float | None] = mapped_column(db.Float)
    height_cm: Mapped[float | None] = mapped_column(db.Float)
    bmi: Mapped[float | None] = mapped_column(db.Float)
    body_fat_percent: Mapped[float | None] = mapped_column(db.Float)


register_entity(
    "wellness_entries",
    WellnessEntry,
    unique_key=("user_id", "date"),
    default_order=("-date", "-id"),
)
register_entity("wellness_presets", WellnessPreset, unique_key=("user_id",))
