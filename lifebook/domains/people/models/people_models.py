"""People and the per-person sub-collections."""

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column

from lifebook.core.storage.column_types import JSONList
from lifebook.core.storage.registry import register_entity
from lifebook.core.users.models import TimestampMixin, owner_fk
from lifebook.extensions import db


def person_fk():
    return mapped_column(db.ForeignKey("people.id", ondelete="CASCADE"), index=True, nullable=False)


class Person(db.Model, TimestampMixin):
    __tablename__ = "people"
    __table_args__ = (db.Index("ix_people_user_name", "user_id", "name"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    relationship: Mapped[str | None] = mapped_column(db.String(128))
    how_met: Mapped[str | None] = mapped_column(db.Text)
    interests: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    personality_traits: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    conversation_style: Mapped[str | None] = mapped_column(db.String(64))
    shared_experiences: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    story_preferences: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    notes: Mapped[str | None] = mapped_column(db.Text)


class PersonTextUpload(db.Model, TimestampMixin):
    __tablename__ = "person_text_uploads"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    person_id: Mapped[int] = person_fk()
    original_name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    stored_name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    mime_type: Mapped[str | None] = mapped_column(db.String(128))
    size_bytes: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)


class PersonTopic(db.Model, TimestampMixin):
    __tablename__ = "person_topics"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    person_id: Mapped[int] = person_fk()
    topic: Mapped[str] = mapped_column(db.Text, nullable=False)
    is_used: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=False)


class PersonInsideJoke(db.Model, TimestampMixin):
    __tablename__ = "person_inside_jokes"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    person_id: Mapped[int] = person_fk()
    content: Mapped[str] = mapped_column(db.Text, nullable=False)
    context: Mapped[str | None] = mapped_column(db.Text)


register_entity("people", Person, default_order=("name", "id"))
register_entity("person_text_uploads", PersonTextUpload)
register_entity("person_topics", PersonTopic)
register_entity("person_inside_jokes", PersonInsideJoke)
