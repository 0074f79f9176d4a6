"""Stories, their people tags, practice sessions and conversation starters."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from lifebook.core.storage.column_types import JSONList
from lifebook.core.storage.registry import register_entity
from lifebook.core.users.models import TimestampMixin, owner_fk
from lifebook.core.utils.dates import utcnow
from lifebook.extensions import db


class Story(db.Model, TimestampMixin):
    __tablename__ = "stories"
    __table_args__ = (db.Index("ix_stories_user_created_at", "user_id", "created_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    journal_entry_id: Mapped[int | None] = mapped_column(
        db.ForeignKey("journal_entries.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    content: Mapped[str] = mapped_column(db.Text, nullable=False)
    tone: Mapped[str] = mapped_column(db.String(64), nullable=False, default="casual")
    duration_seconds: Mapped[int] = mapped_column(db.Integer, nullable=False, default=30)
    tags: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    times_told: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)
    success_rating: Mapped[int | None] = mapped_column(db.Integer)


class StoryPerson(db.Model):
    __tablename__ = "story_people"
    __table_args__ = (db.UniqueConstraint("story_id", "person_id", name="uq_story_people_pair"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    story_id: Mapped[int] = mapped_column(db.ForeignKey("stories.id", ondelete="CASCADE"), index=True, nullable=False)
    person_id: Mapped[int] = mapped_column(db.ForeignKey("people.id", ondelete="CASCADE"), index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)


class PracticeSession(db.Model):
    __tablename__ = "practice_sessions"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    story_id: Mapped[int | None] = mapped_column(db.ForeignKey("stories.id", ondelete="SET NULL"), nullable=True)
    session_type: Mapped[str] = mapped_column(db.String(64), nullable=False)
    feedback: Mapped[str | None] = mapped_column(db.Text)
    rating: Mapped[int | None] = mapped_column(db.Integer)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)


class ConversationStarter(db.Model):
    __tablename__ = "conversation_starters"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    story_id: Mapped[int | None] = mapped_column(db.ForeignKey("stories.id", ondelete="SET NULL"), nullable=True)
    question: Mapped[str] = mapped_column(db.Text, nullable=False)
    context: Mapped[str | None] = mapped_column(db.Text)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)


register_entity("stories", Story)
register_entity("story_people", StoryPerson, unique_key=("story_id", "person_id"))
register_entity("practice_sessions", PracticeSession)
register_entity("conversation_starters", ConversationStarter)
