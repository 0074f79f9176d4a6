"""Secondary store: an embedded SQLite file reached with plain SQL.

Rows come back as mappings and go through the translator, so legacy values
(comma-separated lists, ``CURRENT_TIMESTAMP`` text) are read without the ORM
type processors getting in the way.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from lifebook.core.storage.operations import Clause, Operation
from lifebook.core.storage.translator import to_canonical, to_canonical_many, to_sqlite_values
from lifebook.core.utils import dates

logger = logging.getLogger(__name__)

SHADOW_EMAIL = "user-{user_id}@shadow.lifebook"

_SQL_OPERATORS = {"eq": "=", "ne": "!=", "gte": ">=", "lte": "<=", "gt": ">", "lt": "<"}


def create_secondary_engine(path: Path, busy_timeout: float = 30.0) -> Engine:
    engine = sa.create_engine(
        f"sqlite:///{path}",
        connect_args={"timeout": busy_timeout, "check_same_thread": False},
    )

    @sa.event.listens_for(engine, "connect")
    def _configure(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout * 1000)}")
        cursor.close()

    return engine


def _quote(name: str) -> str:
    return f'"{name}"'


class SecondaryStore:
    name = "secondary"

    def __init__(self, path: Path, busy_timeout: float = 30.0) -> None:
        self.path = Path(path)
        self.engine = create_secondary_engine(self.path, busy_timeout)

    def run(self, op: Operation) -> Any:
        handler = getattr(self, f"_{op.kind.value}")
        return handler(op)

    def ensure_shadow_user(self, user_id: int) -> None:
        """Insert a placeholder ``users`` row so owned rows satisfy their FK.

        Failures are logged and swallowed; the owned write reports its own error.
        """
        now = dates.utcnow().isoformat()
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    sa.text(
                        "INSERT OR IGNORE INTO users (id, email, name, password_hash, created_at, updated_at) "
                        "VALUES (:id, :email, :name, :password_hash, :now, :now)"
                    ),
                    {
                        "id": user_id,
                        "email": SHADOW_EMAIL.format(user_id=user_id),
                        "name": "",
                        "password_hash": "",
                        "now": now,
                    },
                )
        except SQLAlchemyError as exc:
            logger.warning("Shadow user %s not written to embedded store: %s", user_id, exc)

    def dispose(self) -> None:
        self.engine.dispose()

    # -- SQL building --------------------------------------------------------

    def _where(self, clauses: tuple[Clause, ...], columns, params: dict) -> str:
        parts = []
        for index, clause in enumerate(clauses):
            column = _quote(clause.field)
            name = f"w{index}"
            if clause.operator == "in":
                names = []
                for position, item in enumerate(clause.value):
                    params[f"{name}_{position}"] = self._encode(columns, clause.field, item)
                    names.append(f":{name}_{position}")
                parts.append(f"{column} IN ({', '.join(names)})" if names else "0")
                continue
            encoded = self._encode(columns, clause.field, clause.value)
            if encoded is None and clause.operator in ("eq", "ne"):
                parts.append(f"{column} IS {'NOT ' if clause.operator == 'ne' else ''}NULL")
            elif clause.operator == "ne":
                params[name] = encoded
                parts.append(f"({column} != :{name} OR {column} IS NULL)")
            else:
                params[name] = encoded
                parts.append(f"{column} {_SQL_OPERATORS[clause.operator]} :{name}")
        return " WHERE " + " AND ".join(parts) if parts else ""

    @staticmethod
    def _encode(columns, field: str, value: Any) -> Any:
        return to_sqlite_values(columns, {field: value})[field]

    def _order(self, op: Operation) -> str:
        terms = [
            f"{_quote(item.lstrip('-'))} {'DESC' if item.startswith('-') else 'ASC'}"
            for item in op.order_by
        ]
        sql = " ORDER BY " + ", ".join(terms) if terms else ""
        if op.limit is not None:
            sql += f" LIMIT {int(op.limit)}"
            if op.offset:
                sql += f" OFFSET {int(op.offset)}"
        elif op.offset:
            sql += f" LIMIT -1 OFFSET {int(op.offset)}"
        return sql

    def _fetch(self, conn, op: Operation, clauses=None, *, ordered=True, limit=None) -> list[dict]:
        params: dict = {}
        spec = op.entity
        sql = f"SELECT * FROM {_quote(spec.table_name)}"
        sql += self._where(op.clauses if clauses is None else clauses, spec.columns, params)
        if ordered:
            sql += self._order(op)
        if limit is not None:
            sql += f" LIMIT {int(limit)}"
        return [dict(row) for row in conn.execute(sa.text(sql), params).mappings()]

    def _by_id(self, conn, op: Operation, row_id: int) -> Optional[dict]:
        rows = self._fetch(conn, op, (Clause("id", "eq", row_id),), ordered=False)
        return to_canonical(op.entity.columns, rows[0]) if rows else None

    def _insert(self, conn, op: Operation, values: dict) -> int:
        spec = op.entity
        now = dates.utcnow()
        values = dict(values)
        if spec.has_column("created_at"):
            values.setdefault("created_at", now)
        if spec.has_column("updated_at"):
            values.setdefault("updated_at", now)
        for name, column in spec.columns.items():
            # Column defaults live in the ORM, not in the generated DDL.
            if name in values or column.primary_key or column.default is None:
                continue
            if column.default.is_scalar:
                values[name] = column.default.arg
            elif column.default.is_callable:
                values[name] = column.default.arg(None)
        encoded = to_sqlite_values(spec.columns, values)
        names = ", ".join(_quote(key) for key in encoded)
        binds = ", ".join(f":{key}" for key in encoded)
        result = conn.execute(
            sa.text(f"INSERT INTO {_quote(spec.table_name)} ({names}) VALUES ({binds})"), encoded
        )
        return int(values.get("id") or result.lastrowid)

    def _set(self, conn, op: Operation, row_ids: list[int], values: dict) -> None:
        spec = op.entity
        values = {key: value for key, value in values.items() if key != "id"}
        if spec.has_column("updated_at"):
            values["updated_at"] = dates.utcnow()
        encoded = to_sqlite_values(spec.columns, values)
        assignments = ", ".join(f"{_quote(key)} = :{key}" for key in encoded)
        for row_id in row_ids:
            conn.execute(
                sa.text(f"UPDATE {_quote(spec.table_name)} SET {assignments} WHERE id = :_row_id"),
                {**encoded, "_row_id": row_id},
            )

    # -- operations --------------------------------------------------------

    def _create(self, op: Operation) -> dict:
        with self.engine.begin() as conn:
            row_id = self._insert(conn, op, op.values)
            return self._by_id(conn, op, row_id)

    def _read(self, op: Operation) -> Optional[dict]:
        with self.engine.connect() as conn:
            rows = self._fetch(conn, replace(op, limit=1))
        return to_canonical(op.entity.columns, rows[0]) if rows else None

    def _list(self, op: Operation) -> list[dict]:
        with self.engine.connect() as conn:
            rows = self._fetch(conn, op)
        return to_canonical_many(op.entity.columns, rows)

    def _count(self, op: Operation) -> int:
        params: dict = {}
        spec = op.entity
        sql = f"SELECT COUNT(*) FROM {_quote(spec.table_name)}" + self._where(op.clauses, spec.columns, params)
        with self.engine.connect() as conn:
            return int(conn.execute(sa.text(sql), params).scalar_one())

    def _update(self, op: Operation) -> Optional[dict]:
        with self.engine.begin() as conn:
            rows = self._fetch(conn, op)
            if not rows:
                return None
            self._set(conn, op, [row["id"] for row in rows], op.values)
            return self._by_id(conn, op, rows[0]["id"])

    def _delete(self, op: Operation) -> int:
        params: dict = {}
        spec = op.entity
        sql = f"DELETE FROM {_quote(spec.table_name)}" + self._where(op.clauses, spec.columns, params)
        with self.engine.begin() as conn:
            return int(conn.execute(sa.text(sql), params).rowcount)

    def _upsert(self, op: Operation) -> dict:
        match = op.conflict_filters()
        scope = {**op.equality_filters(), **match}
        clauses = tuple(Clause(key, "eq", value) for key, value in scope.items())
        try:
            with self.engine.begin() as conn:
                rows = self._fetch(conn, op, clauses, ordered=False, limit=1)
                if rows:
                    self._set(conn, op, [rows[0]["id"]], op.values)
                    return self._by_id(conn, op, rows[0]["id"])
                row_id = self._insert(conn, op, {**scope, **op.values})
                return self._by_id(conn, op, row_id)
        except IntegrityError:
            # A concurrent writer inserted the same key first.
            with self.engine.begin() as conn:
                rows = self._fetch(conn, op, clauses, ordered=False, limit=1)
                if not rows:
                    raise
                self._set(conn, op, [rows[0]["id"]], op.values)
                return self._by_id(conn, op, rows[0]["id"])
