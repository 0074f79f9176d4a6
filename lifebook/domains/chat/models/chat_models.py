"""AI chat conversations and their messages."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from lifebook.core.storage.registry import register_entity
from lifebook.core.users.models import TimestampMixin, owner_fk
from lifebook.core.utils.dates import utcnow
from lifebook.extensions import db


class AIConversation(db.Model, TimestampMixin):
    __tablename__ = "ai_conversations"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    title: Mapped[str | None] = mapped_column(db.String(255))
    # Rolling summary reused as long-term memory by later conversations.
    summary: Mapped[str | None] = mapped_column(db.Text)


class AIMessage(db.Model):
    __tablename__ = "ai_messages"
    __table_args__ = (db.Index("ix_ai_messages_conversation_created", "conversation_id", "created_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = owner_fk()
    conversation_id: Mapped[int] = mapped_column(
        db.ForeignKey("ai_conversations.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(db.String(16), nullable=False)
    content: Mapped[str] = mapped_column(db.Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)


register_entity("ai_conversations", AIConversation, default_order=("-updated_at", "-id"))
register_entity("ai_messages", AIMessage, default_order=("created_at", "id"))
