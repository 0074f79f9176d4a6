"""Self-development records: goals, beliefs, triggers, protocols, identity,
dating profile and genome uploads."""

from __future__ import annotations

import datetime as dt

from sqlalchemy.orm import Mapped, mapped_column

from lifebook.core.storage.column_types import JSONList, JSONObject
from lifebook.core.storage.registry import register_entity
from lifebook.core.users.models import TimestampMixin, owner_fk
from lifebook.extensions import db


def _single_owner_fk():
    return mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)


class Goal(db.Model, TimestampMixin):
    __tablename__ = "goals"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(db.Text)
    area: Mapped[str | None] = mapped_column(db.String(64))
    target_date: Mapped[dt.date | None] = mapped_column(db.Date)
    status: Mapped[str] = mapped_column(db.String(32), nullable=False, default="active")


class Belief(db.Model, TimestampMixin):
    __tablename__ = "beliefs"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    current_belief: Mapped[str] = mapped_column(db.Text, nullable=False)
    desired_belief: Mapped[str | None] = mapped_column(db.Text)
    change_plan: Mapped[str | None] = mapped_column(db.Text)


class AnxietyTrigger(db.Model, TimestampMixin):
    __tablename__ = "anxiety_triggers"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(db.String(64))
    intensity: Mapped[int | None] = mapped_column(db.Integer)
    notes: Mapped[str | None] = mapped_column(db.Text)


class Protocol(db.Model, TimestampMixin):
    __tablename__ = "protocols"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    when_to_use: Mapped[str | None] = mapped_column(db.Text)
    steps: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    cadence: Mapped[str | None] = mapped_column(db.String(64))


class IdentityVision(db.Model, TimestampMixin):
    __tablename__ = "identity_visions"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = _single_owner_fk()
    vision: Mapped[str | None] = mapped_column(db.Text)
    core_values: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    principles: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)


class DatingProfile(db.Model, TimestampMixin):
    __tablename__ = "dating_profiles"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = _single_owner_fk()
    partner_vision: Mapped[str | None] = mapped_column(db.Text)
    must_haves: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    nice_to_haves: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    red_flags: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    self_reflection_answers: Mapped[dict] = mapped_column(JSONObject, nullable=False, default=dict)


class GenomeUpload(db.Model, TimestampMixin):
    __tablename__ = "genome_uploads"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    original_name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    stored_name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    mime_type: Mapped[str | None] = mapped_column(db.String(128))
    size_bytes: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)


register_entity("goals", Goal, default_order=("-updated_at", "-id"))
register_entity("beliefs", Belief)
register_entity("anxiety_triggers", AnxietyTrigger)
register_entity("protocols", Protocol, default_order=("-updated_at", "-id"))
register_entity("identity_visions", IdentityVision, unique_key=("user_id",))
register_entity("dating_profiles", DatingProfile, unique_key=("user_id",))
register_entity("genome_uploads", GenomeUpload)
