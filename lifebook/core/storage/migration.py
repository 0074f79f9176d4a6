"""Copy a user's embedded-store rows into the primary store."""

from __future__ import annotations

import logging
from typing import Any, Dict

import sqlalchemy as sa

from lifebook.core.storage.accessor import DualStoreAccessor
from lifebook.core.storage.operations import build_operation
from lifebook.core.storage.registry import EntitySpec, dependency_order
from lifebook.core.storage.secondary import SHADOW_EMAIL
from lifebook.core.storage.translator import normalize_payload
from lifebook.extensions import db

logger = logging.getLogger(__name__)


class MigrationConflict(Exception):
    """An embedded row's id is already taken in the primary by someone else."""

    def __init__(self, entity: str, record_id: int, reason: str) -> None:
        super().__init__(f"{entity} {record_id}: {reason}")
        self.entity = entity
        self.record_id = record_id
        self.reason = reason


def migrate_user(accessor: DualStoreAccessor, user_id: int) -> Dict[str, Dict[str, int]]:
    """Insert embedded rows owned by ``user_id`` that the primary lacks.

    Rows are matched by id. A primary row with the same id is skipped only
    when it belongs to the same user (same email for the user row itself);
    otherwise :class:`MigrationConflict` is raised and nothing is committed.
    Nothing is deleted from the embedded file.
    """
    if not accessor.primary.configured:
        raise RuntimeError("primary store is not configured")
    try:
        return _copy_rows(accessor, user_id)
    except Exception:
        db.session.rollback()
        raise


def _copy_rows(accessor: DualStoreAccessor, user_id: int) -> Dict[str, Dict[str, int]]:
    report: Dict[str, Dict[str, int]] = {}
    engine = accessor.primary.engine
    placeholder = SHADOW_EMAIL.format(user_id=user_id)
    copied_tables = []
    ordered = dependency_order()
    for spec in ordered:
        accessor.provisioner.ensure(spec, accessor.secondary.engine)
        accessor.provisioner.ensure_primary(spec, engine)
    for spec in ordered:
        operation = build_operation(spec, "list", {spec.owner_key: user_id}, order_by=("id",))
        records = accessor.secondary.run(operation)
        copied = skipped = 0
        for record in records:
            existing = db.session.get(spec.model, record["id"])
            if existing is not None:
                _check_same_owner(spec, existing, record, user_id, placeholder)
                skipped += 1
                continue
            if spec.owner_key == "id" and record.get("email") == placeholder:
                raise LookupError(f"user {user_id} only exists as a placeholder in the embedded store")
            db.session.add(spec.model(**normalize_payload(spec.columns, record)))
            copied += 1
        # Single commit below: a conflict in any table leaves the primary untouched.
        db.session.flush()
        if copied:
            copied_tables.append((spec.table_name, copied))
        report[spec.name] = {"copied": copied, "skipped": skipped}
    db.session.commit()
    for table_name, copied in copied_tables:
        if engine.dialect.name == "postgresql":
            _advance_sequence(table_name)
        logger.info("Migrated %s %s rows for user %s", copied, table_name, user_id)
    return report


def _check_same_owner(spec: EntitySpec, existing: Any, record: dict, user_id: int, placeholder: str) -> None:
    if spec.owner_key == "id":
        embedded_email = (record.get("email") or "").lower()
        if embedded_email != placeholder and embedded_email != (existing.email or "").lower():
            raise MigrationConflict(spec.name, record["id"], "primary holds a different account under this id")
        return
    if getattr(existing, spec.owner_key) != user_id:
        raise MigrationConflict(spec.name, record["id"], "primary row with this id belongs to another user")


def _advance_sequence(table_name: str) -> None:
    db.session.execute(
        sa.text(
            f"SELECT setval(pg_get_serial_sequence('{table_name}', 'id'), "
            f"(SELECT COALESCE(MAX(id), 1) FROM \"{table_name}\"))"
        )
    )
    db.session.commit()
