"""Logical entity registry.

Each entity is declared once as a Flask-SQLAlchemy model; the registry wraps
that table metadata with the few facts the accessor needs (owner column,
natural unique key, default ordering). The embedded store's schema is derived
from the same metadata, so both stores share one column set.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from typing import Dict, Tuple

import sqlalchemy as sa

# Model modules imported by ``load_models`` so every entity is registered
# before the first request.
MODEL_MODULES: Tuple[str, ...] = (
    "lifebook.core.users.models",
    "lifebook.domains.journal.models.journal_models",
    "lifebook.domains.people.models.people_models",
    "lifebook.domains.stories.models.story_models",
    "lifebook.domains.jokes.models.joke_models",
    "lifebook.domains.wellness.models.wellness_models",
    "lifebook.domains.chat.models.chat_models",
    "lifebook.domains.personal.models.personal_models",
    "lifebook.domains.ingest.models.intake_models",
    "lifebook.domains.coach.models.coach_models",
)


@dataclass(frozen=True)
class EntitySpec:
    name: str
    model: type
    owner_key: str = "user_id"
    unique_key: Tuple[str, ...] = ()
    default_order: Tuple[str, ...] = ("-created_at", "-id")
    # Only the auth collaborator may look records up without an owner filter.
    allow_unscoped: bool = False
    # Creates must not fall back while a primary is configured: the embedded
    # store would hand out ids the primary has already issued.
    primary_creates_only: bool = False
    columns: Dict[str, sa.Column] = field(default_factory=dict, compare=False, repr=False)

    @property
    def table(self) -> sa.Table:
        return self.model.__table__

    @property
    def table_name(self) -> str:
        return self.table.name

    @property
    def parent_tables(self) -> Tuple[str, ...]:
        parents = []
        for column in self.table.columns:
            for fk in column.foreign_keys:
                target = fk.column.table.name
                if target != self.table_name and target not in parents:
                    parents.append(target)
        return tuple(parents)

    def has_column(self, name: str) -> bool:
        return name in self.columns


_ENTITIES: Dict[str, EntitySpec] = {}


def register_entity(name: str, model: type, **options) -> EntitySpec:
    """Register ``model`` under a logical entity name. Idempotent."""
    existing = _ENTITIES.get(name)
    if existing is not None and existing.model is model:
        return existing
    columns = {column.name: column for column in model.__table__.columns}
    spec = EntitySpec(name=name, model=model, columns=columns, **options)
    _ENTITIES[name] = spec
    return spec


def get_entity(name: str) -> EntitySpec:
    try:
        return _ENTITIES[name]
    except KeyError:
        raise KeyError(f"unknown entity: {name}") from None


def entity_for_table(table_name: str) -> EntitySpec:
    for spec in _ENTITIES.values():
        if spec.table_name == table_name:
            return spec
    raise KeyError(f"no entity registered for table {table_name}")


def dependency_order() -> list[EntitySpec]:
    """Entities sorted so FK parents come before their children."""
    ordered: list[EntitySpec] = []
    seen: set[str] = set()

    def visit(spec: EntitySpec) -> None:
        if spec.name in seen:
            return
        seen.add(spec.name)
        for table_name in spec.parent_tables:
            visit(entity_for_table(table_name))
        ordered.append(spec)

    for spec in sorted(_ENTITIES.values(), key=lambda s: s.name):
        visit(spec)
    return ordered


def load_models() -> None:
    for module in MODEL_MODULES:
        importlib.import_module(module)
