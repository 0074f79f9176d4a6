"""Jokes and who they have been told to."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from lifebook.core.storage.registry import register_entity
from lifebook.core.users.models import TimestampMixin, owner_fk
from lifebook.core.utils.dates import utcnow
from lifebook.extensions import db


class Joke(db.Model, TimestampMixin):
    __tablename__ = "jokes"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    content: Mapped[str] = mapped_column(db.Text, nullable=False)
    category: Mapped[str | None] = mapped_column(db.String(64))
    difficulty: Mapped[str | None] = mapped_column(db.String(16))
    times_told: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)
    success_rating: Mapped[int | None] = mapped_column(db.Integer)
    notes: Mapped[str | None] = mapped_column(db.Text)


class JokePerson(db.Model):
    __tablename__ = "joke_people"
    __table_args__ = (db.UniqueConstraint("joke_id", "person_id", name="uq_joke_people_pair"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    joke_id: Mapped[int] = mapped_column(db.ForeignKey("jokes.id", ondelete="CASCADE"), index=True, nullable=False)
    person_id: Mapped[int] = mapped_column(db.ForeignKey("people.id", ondelete="CASCADE"), index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)


register_entity("jokes", Joke)
register_entity("joke_people", JokePerson, unique_key=("joke_id", "person_id"))
