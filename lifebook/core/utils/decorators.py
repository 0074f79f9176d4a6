"""Reusable decorators for controllers."""

from __future__ import annotations

import hmac
from functools import wraps
from typing import Callable, Optional, TypeVar

from flask import current_app, jsonify, request

F = TypeVar("F", bound=Callable)


def _token_matches(presented: Optional[str], expected: Optional[str]) -> bool:
    if not presented or not expected:
        return False
    return hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


def _bearer_or_raw(header_value: str) -> str:
    value = (header_value or "").strip()
    return value[len("Bearer ") :] if value.startswith("Bearer ") else value


def require_admin_key(fn: F) -> F:
    """Validate the X-Admin-Key header against ADMIN_KEY; unset key disables the route."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        expected = current_app.config.get("ADMIN_KEY")
        if not expected:
            return jsonify({"ok": False, "error": "not_found"}), 404
        if not _token_matches(request.headers.get("X-Admin-Key"), expected):
            return jsonify({"ok": False, "error": "forbidden"}), 403
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_ingest_token(fn: F) -> F:
    """Accept X-Ingest-Token or ``Authorization: Bearer <token>`` matching HEALTH_INGEST_TOKEN."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        presented = request.headers.get("X-Ingest-Token") or _bearer_or_raw(
            request.headers.get("Authorization", "")
        )
        if not _token_matches(presented, current_app.config.get("HEALTH_INGEST_TOKEN")):
            return jsonify({"ok": False, "error": "unauthorized"}), 401
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
