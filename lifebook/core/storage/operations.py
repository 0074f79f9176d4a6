"""Logical operation descriptors understood by both stores."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from lifebook.core.storage.registry import EntitySpec
from lifebook.core.storage.translator import normalize_payload, to_snake


class OpKind(str, Enum):
    CREATE = "create"
    READ = "read"
    LIST = "list"
    COUNT = "count"
    UPDATE = "update"
    DELETE = "delete"
    UPSERT = "upsert"

    @property
    def mutates(self) -> bool:
        return self in (OpKind.CREATE, OpKind.UPDATE, OpKind.DELETE, OpKind.UPSERT)


_OPERATORS = {"eq", "ne", "gte", "lte", "gt", "lt", "in"}


@dataclass(frozen=True)
class Clause:
    field: str
    operator: str
    value: Any


@dataclass(frozen=True)
class Operation:
    entity: EntitySpec
    kind: OpKind
    clauses: Tuple[Clause, ...] = ()
    values: Dict[str, Any] = field(default_factory=dict)
    order_by: Tuple[str, ...] = ()
    limit: Optional[int] = None
    offset: Optional[int] = None
    conflict_keys: Tuple[str, ...] = ()

    @property
    def owner_id(self) -> Optional[int]:
        """Owning user id, taken from the filter or the create payload."""
        owner_key = self.entity.owner_key
        for clause in self.clauses:
            if clause.field == owner_key and clause.operator == "eq":
                return clause.value
        value = self.values.get(owner_key)
        return int(value) if value is not None else None

    def equality_filters(self) -> Dict[str, Any]:
        return {c.field: c.value for c in self.clauses if c.operator == "eq"}

    def conflict_filters(self) -> Dict[str, Any]:
        merged = {**self.equality_filters(), **self.values}
        return {key: merged.get(key) for key in self.conflict_keys}


def build_operation(
    spec: EntitySpec,
    op: str | OpKind,
    filters: Optional[Dict[str, Any]] = None,
    payload: Optional[Dict[str, Any]] = None,
    *,
    order_by: Optional[Tuple[str, ...] | List[str]] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    conflict_keys: Optional[Tuple[str, ...]] = None,
    scoped: bool = True,
) -> Operation:
    """Validate and normalise an operation before it reaches any store.

    Unknown fields, a missing owner filter or an unknown operator are caller
    bugs and raise ``ValueError`` here, so they never trigger a fallback.
    """
    kind = OpKind(op)
    clauses = tuple(_parse_filter(spec, key, value) for key, value in (filters or {}).items())
    try:
        values = normalize_payload(spec.columns, payload or {})
    except KeyError as exc:
        raise ValueError(f"unknown field for {spec.name}: {exc.args[0]}") from None
    if kind is not OpKind.CREATE:
        values.pop("id", None)

    if kind is not OpKind.CREATE:
        owner_fields = {c.field for c in clauses if c.operator == "eq"}
        if spec.owner_key not in owner_fields and (scoped or not spec.allow_unscoped):
            raise ValueError(f"{kind.value} on {spec.name} requires a {spec.owner_key} filter")
    elif spec.owner_key != "id" and values.get(spec.owner_key) is None:
        raise ValueError(f"create on {spec.name} requires {spec.owner_key}")

    if kind in (OpKind.UPDATE, OpKind.UPSERT) and not values:
        raise ValueError(f"{kind.value} on {spec.name} needs at least one field")

    keys = tuple(conflict_keys or spec.unique_key)
    if kind is OpKind.UPSERT and not keys:
        raise ValueError(f"upsert on {spec.name} needs conflict keys")
    for key in keys:
        if not spec.has_column(key):
            raise ValueError(f"unknown conflict key for {spec.name}: {key}")

    ordering = tuple(order_by) if order_by is not None else spec.default_order
    for item in ordering:
        if not spec.has_column(item.lstrip("-")):
            raise ValueError(f"unknown order field for {spec.name}: {item}")

    return Operation(
        entity=spec,
        kind=kind,
        clauses=clauses,
        values=values,
        order_by=ordering,
        limit=limit,
        offset=offset,
        conflict_keys=keys,
    )


def _parse_filter(spec: EntitySpec, key: str, value: Any) -> Clause:
    name, _, operator = to_snake(key).partition("__")
    operator = operator or "eq"
    if operator not in _OPERATORS:
        raise ValueError(f"unknown filter operator: {operator}")
    if not spec.has_column(name):
        raise ValueError(f"unknown filter field for {spec.name}: {name}")
    column = spec.columns[name]
    if operator == "in":
        coerced = tuple(normalize_payload({name: column}, {name: v})[name] for v in value)
    else:
        coerced = normalize_payload({name: column}, {name: value})[name]
    return Clause(field=name, operator=operator, value=coerced)
