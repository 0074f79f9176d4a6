"""User model and the timestamp columns shared by mutable tables."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from lifebook.core.storage.registry import register_entity
from lifebook.core.utils.dates import utcnow
from lifebook.extensions import db


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)


class User(db.Model, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(db.String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False, default="")
    password_hash: Mapped[str] = mapped_column(db.String(255), nullable=False, default="")


def owner_fk():
    """``user_id`` column owned by ``users`` with cascading deletes."""
    return mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)


register_entity(
    "users",
    User,
    owner_key="id",
    allow_unscoped=True,
    default_order=("id",),
    primary_creates_only=True,
)
