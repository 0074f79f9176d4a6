"""Primary store: the Flask-SQLAlchemy session over ``SQLALCHEMY_DATABASE_URI``."""

from __future__ import annotations

from typing import Any, Optional

import sqlalchemy as sa
from flask import Flask
from sqlalchemy.exc import IntegrityError

from lifebook.core.storage.operations import Clause, OpKind, Operation
from lifebook.core.storage.translator import to_canonical, to_canonical_many
from lifebook.core.utils import dates
from lifebook.extensions import db


def column_condition(column, clause: Clause):
    """SQLAlchemy expression for one filter clause."""
    operator, value = clause.operator, clause.value
    if operator == "eq":
        return column.is_(None) if value is None else column == value
    if operator == "ne":
        return column.is_not(None) if value is None else sa.or_(column != value, column.is_(None))
    if operator == "gte":
        return column >= value
    if operator == "lte":
        return column <= value
    if operator == "gt":
        return column > value
    if operator == "lt":
        return column < value
    if operator == "in":
        return column.in_(value)
    raise ValueError(f"unsupported operator {operator}")


class PrimaryStore:
    name = "primary"

    def __init__(self, app: Flask) -> None:
        self.app = app

    @property
    def configured(self) -> bool:
        return "sqlalchemy" in self.app.extensions

    @property
    def engine(self):
        return db.engine

    def run(self, op: Operation) -> Any:
        handler = getattr(self, f"_{op.kind.value}")
        try:
            return handler(op)
        except Exception:
            db.session.rollback()
            raise

    # -- helpers -----------------------------------------------------------

    def _select(self, op: Operation):
        model = op.entity.model
        stmt = sa.select(model)
        for clause in op.clauses:
            stmt = stmt.where(column_condition(getattr(model, clause.field), clause))
        return stmt

    def _ordered(self, op: Operation, stmt):
        model = op.entity.model
        for item in op.order_by:
            column = getattr(model, item.lstrip("-"))
            stmt = stmt.order_by(column.desc() if item.startswith("-") else column.asc())
        if op.limit is not None:
            stmt = stmt.limit(op.limit)
        if op.offset:
            stmt = stmt.offset(op.offset)
        return stmt

    def _canonical(self, op: Operation, instance) -> Optional[dict]:
        return None if instance is None else to_canonical(op.entity.columns, instance)

    # -- operations --------------------------------------------------------

    def _create(self, op: Operation) -> dict:
        spec = op.entity
        values = dict(op.values)
        now = dates.utcnow()
        if spec.has_column("created_at"):
            values.setdefault("created_at", now)
        if spec.has_column("updated_at"):
            values.setdefault("updated_at", now)
        instance = spec.model(**values)
        db.session.add(instance)
        db.session.commit()
        return self._canonical(op, instance)

    def _read(self, op: Operation) -> Optional[dict]:
        instance = db.session.execute(self._ordered(op, self._select(op)).limit(1)).scalars().first()
        return self._canonical(op, instance)

    def _list(self, op: Operation) -> list[dict]:
        rows = db.session.execute(self._ordered(op, self._select(op))).scalars().all()
        return to_canonical_many(op.entity.columns, rows)

    def _count(self, op: Operation) -> int:
        model = op.entity.model
        stmt = sa.select(sa.func.count()).select_from(model)
        for clause in op.clauses:
            stmt = stmt.where(column_condition(getattr(model, clause.field), clause))
        return int(db.session.execute(stmt).scalar_one())

    def _update(self, op: Operation) -> Optional[dict]:
        """Apply ``values`` to every match; return the first updated record."""
        instances = db.session.execute(self._ordered(op, self._select(op))).scalars().all()
        if not instances:
            return None
        self._apply(op, instances, op.values)
        db.session.commit()
        return self._canonical(op, instances[0])

    def _delete(self, op: Operation) -> int:
        instances = db.session.execute(self._select(op)).scalars().all()
        for instance in instances:
            db.session.delete(instance)
        db.session.commit()
        return len(instances)

    def _upsert(self, op: Operation) -> dict:
        spec = op.entity
        scope = {**op.equality_filters(), **op.conflict_filters()}
        stmt = sa.select(spec.model).filter_by(**scope)
        existing = db.session.execute(stmt).scalars().first()
        if existing is None:
            values = {**scope, **op.values}
            now = dates.utcnow()
            if spec.has_column("created_at"):
                values.setdefault("created_at", now)
            if spec.has_column("updated_at"):
                values.setdefault("updated_at", now)
            instance = spec.model(**values)
            db.session.add(instance)
            try:
                db.session.commit()
                return self._canonical(op, instance)
            except IntegrityError:
                # Lost a race with a concurrent insert; update the winner.
                db.session.rollback()
                existing = db.session.execute(stmt).scalars().one()
        self._apply(op, [existing], op.values)
        db.session.commit()
        return self._canonical(op, existing)

    def _apply(self, op: Operation, instances, values: dict) -> None:
        now = dates.utcnow()
        for instance in instances:
            for key, value in values.items():
                if key == "id":
                    continue
                setattr(instance, key, value)
            if op.entity.has_column("updated_at"):
                instance.updated_at = now
