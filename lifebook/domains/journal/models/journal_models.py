"""Journal entries."""

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column

from lifebook.core.storage.column_types import JSONList
from lifebook.core.storage.registry import register_entity
from lifebook.core.users.models import TimestampMixin, owner_fk
from lifebook.extensions import db


class JournalEntry(db.Model, TimestampMixin):
    __tablename__ = "journal_entries"
    __table_args__ = (db.Index("ix_journal_entries_user_created_at", "user_id", "created_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    content: Mapped[str] = mapped_column(db.Text, nullable=False)
    mood: Mapped[str | None] = mapped_column(db.String(32))
    tags: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)


register_entity("journal_entries", JournalEntry)
