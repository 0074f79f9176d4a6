"""Owner-scoped record operations used by the domain services.

Every call carries the authenticated user's id, so one user can never read
or change another user's rows; a foreign id behaves exactly like a missing one.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from lifebook.core.errors import NotFound
from lifebook.core.storage import execute


def list_owned(
    entity: str,
    user_id: int,
    *,
    filters: Optional[Dict[str, Any]] = None,
    order_by: Optional[Iterable[str]] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[dict]:
    scoped = {**(filters or {}), "user_id": user_id}
    options: Dict[str, Any] = {"limit": limit, "offset": offset}
    if order_by is not None:
        options["order_by"] = tuple(order_by)
    return execute(entity, "list", scoped, **options).unwrap()


def count_owned(entity: str, user_id: int, *, filters: Optional[Dict[str, Any]] = None) -> int:
    return execute(entity, "count", {**(filters or {}), "user_id": user_id}).unwrap()


def page_owned(
    entity: str,
    user_id: int,
    page: int,
    per_page: int,
    *,
    filters: Optional[Dict[str, Any]] = None,
    order_by: Optional[Iterable[str]] = None,
) -> Tuple[List[dict], int]:
    items = list_owned(
        entity, user_id, filters=filters, order_by=order_by, limit=per_page, offset=(page - 1) * per_page
    )
    return items, count_owned(entity, user_id, filters=filters)


def find_owned(entity: str, user_id: int, **filters: Any) -> Optional[dict]:
    return execute(entity, "read", {**filters, "user_id": user_id}).unwrap()


def get_owned(entity: str, user_id: int, record_id: int, *, label: Optional[str] = None) -> dict:
    record = find_owned(entity, user_id, id=record_id)
    if record is None:
        raise NotFound(label or entity)
    return record


def create_owned(entity: str, user_id: int, payload: Dict[str, Any]) -> dict:
    return execute(entity, "create", None, {**payload, "user_id": user_id}).unwrap()


def update_owned(
    entity: str, user_id: int, record_id: int, payload: Dict[str, Any], *, label: Optional[str] = None
) -> dict:
    if not payload:
        return get_owned(entity, user_id, record_id, label=label)
    record = execute(entity, "update", {"id": record_id, "user_id": user_id}, payload).unwrap()
    if record is None:
        raise NotFound(label or entity)
    return record


def delete_owned(entity: str, user_id: int, record_id: int, *, label: Optional[str] = None) -> None:
    deleted = execute(entity, "delete", {"id": record_id, "user_id": user_id}).unwrap()
    if not deleted:
        raise NotFound(label or entity)


def upsert_owned(
    entity: str,
    user_id: int,
    payload: Dict[str, Any],
    *,
    conflict_keys: Optional[Tuple[str, ...]] = None,
) -> dict:
    return execute(
        entity, "upsert", {"user_id": user_id}, payload, conflict_keys=conflict_keys
    ).unwrap()
