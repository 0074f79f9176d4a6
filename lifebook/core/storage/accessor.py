"""Dual-store accessor: primary first, embedded store as fallback.

A logical write mutates at most one store. When the primary is down the
write lands in the embedded file only and is not replayed later; the two
stores may diverge. Each fallback is logged and counted so the divergence is
visible (``GET /api/admin/storage``), and ``POST /api/admin/migrate`` copies a
user's embedded rows back into the primary. Entities flagged
``primary_creates_only`` (users) are never created in the embedded store while
a primary is configured, so an outage cannot hand an id the primary already
issued to a new account.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from lifebook.core.errors import StorageError
from lifebook.core.storage.location import diagnose
from lifebook.core.storage.operations import OpKind, Operation, build_operation
from lifebook.core.storage.primary import PrimaryStore
from lifebook.core.storage.provisioner import SchemaProvisioner
from lifebook.core.storage.registry import EntitySpec, get_entity
from lifebook.core.storage.secondary import SecondaryStore

logger = logging.getLogger(__name__)

# Failures that move an operation to the other store. Anything else is a bug
# and propagates.
STORE_ERRORS = (SQLAlchemyError, OSError)


class StoreState(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    BOTH_FAILED = "both_failed"


@dataclass
class StoreResult:
    entity: str
    op: str
    state: StoreState
    value: Any = None
    primary_error: Optional[BaseException] = None
    secondary_error: Optional[BaseException] = None
    hint: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state is not StoreState.BOTH_FAILED

    @property
    def fell_back(self) -> bool:
        return self.state is StoreState.SECONDARY and self.primary_error is not None

    def unwrap(self) -> Any:
        if self.state is StoreState.BOTH_FAILED:
            raise StorageError(
                self.entity,
                self.op,
                primary_error=self.primary_error,
                secondary_error=self.secondary_error,
                hint=self.hint,
            )
        return self.value


class DualStoreAccessor:
    def __init__(
        self,
        primary: PrimaryStore,
        secondary: SecondaryStore,
        provisioner: Optional[SchemaProvisioner] = None,
        *,
        auto_provision_primary: bool = True,
    ) -> None:
        self.primary = primary
        self.secondary = secondary
        self.provisioner = provisioner or SchemaProvisioner()
        self.auto_provision_primary = auto_provision_primary
        self.fallback_counts: Counter = Counter()
        self._counts_lock = threading.Lock()

    def execute(
        self,
        entity: str | EntitySpec,
        op: str,
        filters: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
        **options: Any,
    ) -> StoreResult:
        """Run one logical operation and report which store served it.

        Malformed operations raise ``ValueError`` before any store is touched.
        """
        spec = entity if isinstance(entity, EntitySpec) else get_entity(entity)
        operation = build_operation(spec, op, filters, payload, **options)

        primary_error: Optional[BaseException] = None
        if self.primary.configured:
            try:
                value = self._run_primary(operation)
                return StoreResult(spec.name, operation.kind.value, StoreState.PRIMARY, value)
            except STORE_ERRORS as exc:
                primary_error = exc
                if spec.primary_creates_only and operation.kind in (OpKind.CREATE, OpKind.UPSERT):
                    return self._refuse_fallback(operation, exc)
                self._count_fallback(spec.name)
                logger.warning(
                    "Primary store failed for %s %s, falling back to embedded store: %s",
                    operation.kind.value,
                    spec.name,
                    exc,
                )

        try:
            value = self._run_secondary(operation)
        except STORE_ERRORS as exc:
            hint = diagnose(self.secondary.path, exc)
            logger.error(
                "Both stores failed for %s %s: primary=%s secondary=%s (%s)",
                operation.kind.value,
                spec.name,
                primary_error,
                exc,
                hint,
            )
            return StoreResult(
                spec.name,
                operation.kind.value,
                StoreState.BOTH_FAILED,
                primary_error=primary_error,
                secondary_error=exc,
                hint=hint,
            )
        return StoreResult(
            spec.name,
            operation.kind.value,
            StoreState.SECONDARY,
            value,
            primary_error=primary_error,
        )

    def _refuse_fallback(self, operation: Operation, primary_error: BaseException) -> StoreResult:
        spec = operation.entity
        hint = f"new {spec.name} can only be created while the primary store is reachable"
        logger.error(
            "Primary store failed for %s %s, not falling back: %s",
            operation.kind.value,
            spec.name,
            primary_error,
        )
        return StoreResult(
            spec.name,
            operation.kind.value,
            StoreState.BOTH_FAILED,
            primary_error=primary_error,
            hint=hint,
        )

    def _run_primary(self, operation: Operation) -> Any:
        if self.auto_provision_primary:
            self.provisioner.ensure_primary(operation.entity, self.primary.engine)
        return self.primary.run(operation)

    def _run_secondary(self, operation: Operation) -> Any:
        spec = operation.entity
        self.provisioner.ensure(spec, self.secondary.engine)
        owner_id = operation.owner_id
        if operation.kind.mutates and spec.owner_key != "id" and owner_id is not None:
            self.secondary.ensure_shadow_user(owner_id)
        return self.secondary.run(operation)

    def _count_fallback(self, entity: str) -> None:
        with self._counts_lock:
            self.fallback_counts[entity] += 1

    def status(self) -> dict:
        """Operator view of both stores."""
        with self._counts_lock:
            counts = dict(self.fallback_counts)
        return {
            "primary": {
                "configured": self.primary.configured,
                "dialect": self.primary.engine.dialect.name if self.primary.configured else None,
            },
            "secondary": {
                "path": str(self.secondary.path),
                "exists": self.secondary.path.exists(),
                "size_bytes": self.secondary.path.stat().st_size if self.secondary.path.exists() else 0,
            },
            "fallback_counts": counts,
            "fallback_total": sum(counts.values()),
        }
