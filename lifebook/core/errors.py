"""Error taxonomy shared by services and controllers."""

from __future__ import annotations

from typing import Any, Optional


class LifebookError(Exception):
    """Base error carrying a stable machine-readable category."""

    category = "unexpected_error"
    status_code = 500

    def __init__(self, message: str = "", **extra: Any) -> None:
        super().__init__(message or self.category)
        self.message = message or self.category
        self.extra = extra

    def to_dict(self) -> dict:
        payload = {"ok": False, "error": self.category, "message": self.message}
        payload.update({k: v for k, v in self.extra.items() if v is not None})
        return payload


class ValidationFailed(LifebookError):
    """A required field is missing or invalid; raised before any store access."""

    category = "validation_error"
    status_code = 400

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, field=field)
        self.field = field


class NotFound(LifebookError):
    """Record absent or owned by someone else. Never says which."""

    category = "not_found"
    status_code = 404

    def __init__(self, entity: str) -> None:
        super().__init__(f"{entity.replace('_', ' ')} not found")
        self.entity = entity


class StorageError(LifebookError):
    """Both stores failed for one logical operation."""

    category = "storage_error"
    status_code = 503

    def __init__(
        self,
        entity: str,
        op: str,
        *,
        primary_error: Optional[BaseException] = None,
        secondary_error: Optional[BaseException] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(f"could not {op} {entity.replace('_', ' ')}", hint=hint)
        self.entity = entity
        self.op = op
        self.primary_error = primary_error
        self.secondary_error = secondary_error
        self.hint = hint

    def diagnostics(self) -> dict:
        return {
            "primary_error": _describe(self.primary_error),
            "secondary_error": _describe(self.secondary_error),
        }


def _describe(exc: Optional[BaseException]) -> Optional[str]:
    if exc is None:
        return None
    return f"{type(exc).__name__}: {exc}"
