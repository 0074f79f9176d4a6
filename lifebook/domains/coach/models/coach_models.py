"""Coaching issues extracted from journal entries."""

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column

from lifebook.core.storage.column_types import JSONList
from lifebook.core.storage.registry import register_entity
from lifebook.core.users.models import TimestampMixin, owner_fk
from lifebook.extensions import db


class CoachIssue(db.Model, TimestampMixin):
    __tablename__ = "coach_issues"
    __table_args__ = (db.Index("ix_coach_issues_user_status", "user_id", "status"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    journal_entry_id: Mapped[int | None] = mapped_column(
        db.ForeignKey("journal_entries.id", ondelete="SET NULL"), nullable=True
    )
    theme: Mapped[str | None] = mapped_column(db.String(255))
    distortions: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    severity: Mapped[int | None] = mapped_column(db.Integer)
    confidence: Mapped[float | None] = mapped_column(db.Float)
    span_text: Mapped[str | None] = mapped_column(db.Text)
    span_start: Mapped[int | None] = mapped_column(db.Integer)
    span_end: Mapped[int | None] = mapped_column(db.Integer)
    goal: Mapped[str | None] = mapped_column(db.Text)
    techniques: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    tags: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    status: Mapped[str] = mapped_column(db.String(16), nullable=False, default="open")


register_entity("coach_issues", CoachIssue)
