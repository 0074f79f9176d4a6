"""Dual-store persistence.

Route handlers and services call :func:`execute`; the accessor decides which
store serves the operation and returns a :class:`StoreResult`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from flask import Flask, current_app

from lifebook.core.storage.accessor import DualStoreAccessor, StoreResult, StoreState
from lifebook.core.storage.location import resolve_db_path
from lifebook.core.storage.primary import PrimaryStore
from lifebook.core.storage.provisioner import SchemaProvisioner
from lifebook.core.storage.registry import get_entity, load_models, register_entity
from lifebook.core.storage.secondary import SecondaryStore

logger = logging.getLogger(__name__)

EXTENSION_KEY = "lifebook_storage"

__all__ = [
    "DualStoreAccessor",
    "StoreResult",
    "StoreState",
    "execute",
    "get_accessor",
    "get_entity",
    "init_storage",
    "register_entity",
]


def init_storage(app: Flask) -> DualStoreAccessor:
    load_models()
    path = resolve_db_path(
        app.config.get("LIFEBOOK_DB_DIR", ""),
        app.config.get("SECONDARY_DB_FILENAME", "lifebook.db"),
        seed=app.config.get("SECONDARY_SEED_SNAPSHOT", True),
    )
    secondary = SecondaryStore(path, app.config.get("SECONDARY_BUSY_TIMEOUT", 30.0))
    accessor = DualStoreAccessor(
        PrimaryStore(app),
        secondary,
        SchemaProvisioner(),
        auto_provision_primary=app.config.get("PRIMARY_AUTO_PROVISION", True),
    )
    app.extensions[EXTENSION_KEY] = accessor
    logger.info(
        "Storage ready: primary=%s embedded=%s",
        "configured" if accessor.primary.configured else "disabled",
        path,
    )
    return accessor


def get_accessor() -> DualStoreAccessor:
    return current_app.extensions[EXTENSION_KEY]


def execute(
    entity: str,
    op: str,
    filters: Optional[Dict[str, Any]] = None,
    payload: Optional[Dict[str, Any]] = None,
    **options: Any,
) -> StoreResult:
    return get_accessor().execute(entity, op, filters, payload, **options)
