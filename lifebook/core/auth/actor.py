"""The authenticated caller as seen by services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask_jwt_extended import get_jwt, get_jwt_identity


@dataclass(frozen=True)
class Actor:
    user_id: int
    email: Optional[str] = None


def current_actor() -> Actor:
    """Caller identity from the verified bearer token, trusted as-is."""
    claims = get_jwt() or {}
    return Actor(user_id=int(get_jwt_identity()), email=claims.get("email"))
