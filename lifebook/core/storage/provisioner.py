"""Idempotent schema provisioning for both stores.

The embedded store's DDL is compiled from the same table metadata that the
ORM uses, with ``IF NOT EXISTS`` guards. Tables that already exist are
checked for additive drift and missing columns are appended.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from typing import Set, Tuple

import sqlalchemy as sa
from sqlalchemy.dialects import sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.schema import CreateIndex, CreateTable

from lifebook.core.storage.registry import EntitySpec, entity_for_table

logger = logging.getLogger(__name__)

_DIALECT = sqlite.dialect()


def table_ddl(table: sa.Table) -> list[str]:
    """CREATE TABLE / CREATE INDEX statements for the embedded store."""
    statements = [str(CreateTable(table, if_not_exists=True).compile(dialect=_DIALECT)).strip()]
    for index in sorted(table.indexes, key=lambda i: i.name or ""):
        statements.append(str(CreateIndex(index, if_not_exists=True).compile(dialect=_DIALECT)).strip())
    return statements


def add_column_ddl(table: sa.Table, column: sa.Column) -> str:
    # SQLite cannot add NOT NULL columns without a default, so drift columns
    # are appended nullable with their scalar default if any.
    col_type = column.type.compile(dialect=_DIALECT)
    ddl = f'ALTER TABLE "{table.name}" ADD COLUMN "{column.name}" {col_type}'
    default = column.default.arg if column.default is not None and column.default.is_scalar else None
    if isinstance(default, bool):
        ddl += f" DEFAULT {int(default)}"
    elif isinstance(default, (int, float)):
        ddl += f" DEFAULT {default}"
    elif isinstance(default, str):
        ddl += " DEFAULT '{}'".format(default.replace("'", "''"))
    return ddl


class SchemaProvisioner:
    """Provision entity tables at most once per store per process."""

    def __init__(self) -> None:
        self._ensured: Set[Tuple[str, str]] = set()
        # Re-entrant: ensuring a child ensures its FK parents first.
        self._lock = threading.RLock()
        self.runs: Counter = Counter()

    def is_ensured(self, spec: EntitySpec, engine: Engine) -> bool:
        return (str(engine.url), spec.table_name) in self._ensured

    def ensure(self, spec: EntitySpec, engine: Engine) -> None:
        """Make ``spec``'s table (and its FK parents) exist in the embedded store."""
        key = (str(engine.url), spec.table_name)
        if key in self._ensured:
            return
        with self._lock:
            if key in self._ensured:
                return
            for parent in spec.parent_tables:
                self.ensure(entity_for_table(parent), engine)
            with engine.begin() as conn:
                for statement in table_ddl(spec.table):
                    conn.exec_driver_sql(statement)
                self._add_missing_columns(conn, spec.table)
            self._ensured.add(key)
            self.runs[("secondary", spec.table_name)] += 1
            logger.info("Provisioned embedded table %s", spec.table_name)

    def ensure_primary(self, spec: EntitySpec, engine: Engine) -> None:
        """Create the primary table if missing; tolerate a concurrent creator."""
        key = (str(engine.url), spec.table_name)
        if key in self._ensured:
            return
        with self._lock:
            if key in self._ensured:
                return
            for parent in spec.parent_tables:
                self.ensure_primary(entity_for_table(parent), engine)
            try:
                spec.table.create(bind=engine, checkfirst=True)
            except (OperationalError, ProgrammingError) as exc:
                # Another worker created it between the check and the create.
                if not sa.inspect(engine).has_table(spec.table_name):
                    raise
                logger.debug("Table %s appeared concurrently: %s", spec.table_name, exc)
            self._ensured.add(key)
            self.runs[("primary", spec.table_name)] += 1
            logger.info("Provisioned primary table %s", spec.table_name)

    def _add_missing_columns(self, conn, table: sa.Table) -> None:
        existing = {row[1] for row in conn.exec_driver_sql(f'PRAGMA table_info("{table.name}")')}
        for column in table.columns:
            if column.name in existing:
                continue
            try:
                conn.exec_driver_sql(add_column_ddl(table, column))
                logger.info("Added column %s.%s to embedded store", table.name, column.name)
            except OperationalError as exc:
                if "duplicate column" not in str(exc).lower():
                    raise
