"""Registration, login and token issuing on top of the dual store."""

from __future__ import annotations

import logging
from typing import Optional

from flask_jwt_extended import create_access_token

from lifebook.core.auth.password import hash_password, verify_password
from lifebook.core.auth.schemas import LoginRequest, RegisterRequest
from lifebook.core.errors import NotFound, ValidationFailed
from lifebook.core.storage import execute

logger = logging.getLogger(__name__)


def find_user_by_email(email: str) -> Optional[dict]:
    return execute("users", "read", {"email": email.strip().lower()}, scoped=False).unwrap()


def find_user_by_name(name: str) -> Optional[dict]:
    return execute("users", "read", {"name": name.strip()}, scoped=False).unwrap()


def get_user(user_id: int) -> dict:
    user = execute("users", "read", {"id": user_id}).unwrap()
    if user is None:
        raise NotFound("user")
    return user


def register_user(data: RegisterRequest) -> dict:
    if find_user_by_email(data.email):
        raise ValidationFailed("email", "User already exists")
    user = execute(
        "users",
        "create",
        None,
        {"email": data.email, "name": data.name, "password_hash": hash_password(data.password)},
    ).unwrap()
    logger.info("Registered user %s", user["id"])
    return user


def authenticate_user(data: LoginRequest) -> Optional[dict]:
    user = find_user_by_email(data.email) if data.email else find_user_by_name(data.username or "")
    if not user or not verify_password(data.password, user.get("password_hash") or ""):
        return None
    return user


def issue_token(user: dict) -> str:
    return create_access_token(identity=str(user["id"]), additional_claims={"email": user["email"]})
