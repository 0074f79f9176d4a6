"""Record translation between store-native rows and the canonical shape.

The canonical shape is a plain ``dict`` with snake_case keys, JSON list
columns decoded to Python lists, dates as ``YYYY-MM-DD`` and timestamps as
ISO-8601 strings. It is the only shape that leaves the storage package.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Iterable, Mapping

import sqlalchemy as sa

from lifebook.core.storage.json_text import decode_list, decode_object, encode_list, encode_object
from lifebook.core.storage.column_types import JSONList, JSONObject
from lifebook.core.utils.dates import parse_date, parse_datetime

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def to_snake(key: str) -> str:
    """``journalEntryId`` -> ``journal_entry_id``; snake_case passes through."""
    return _CAMEL_BOUNDARY.sub(r"_\1", key).lower()


def to_iso(value: Any) -> Any:
    """Normalise a timestamp from either store to ISO-8601."""
    if value is None or value == "":
        return None
    try:
        return parse_datetime(value).isoformat()
    except (TypeError, ValueError):
        return str(value)


def _date_iso(value: Any) -> Any:
    if value is None or value == "":
        return None
    try:
        return parse_date(value).isoformat()
    except ValueError:
        return str(value)


def _canonical_value(column: sa.Column, value: Any) -> Any:
    col_type = column.type
    if isinstance(col_type, JSONList):
        return decode_list(value)
    if isinstance(col_type, JSONObject):
        return decode_object(value)
    if value is None:
        return None
    if isinstance(col_type, sa.DateTime):
        return to_iso(value)
    if isinstance(col_type, sa.Date):
        return _date_iso(value)
    if isinstance(col_type, sa.Boolean):
        if isinstance(value, str):
            return value.strip().lower() in ("1", "t", "true", "yes")
        return bool(value)
    if isinstance(col_type, sa.Integer):
        return int(value)
    if isinstance(col_type, (sa.Float, sa.Numeric)):
        return float(value)
    return value


def to_canonical(columns: Mapping[str, sa.Column], row: Any) -> dict:
    """Build the canonical record from an ORM instance or a row mapping."""
    if isinstance(row, Mapping):
        source = {to_snake(str(k)): v for k, v in row.items()}
    else:
        source = {name: getattr(row, name, None) for name in columns}
    return {
        name: _canonical_value(column, source.get(name))
        for name, column in columns.items()
    }


def to_canonical_many(columns: Mapping[str, sa.Column], rows: Iterable[Any]) -> list[dict]:
    return [to_canonical(columns, row) for row in rows]


def normalize_payload(columns: Mapping[str, sa.Column], payload: Mapping[str, Any]) -> dict:
    """Canonical input -> Python-typed column values (ORM friendly).

    camelCase keys are accepted; keys that are not columns raise ``KeyError``.
    """
    values: dict[str, Any] = {}
    for raw_key, value in payload.items():
        key = to_snake(str(raw_key))
        if key not in columns:
            raise KeyError(key)
        values[key] = _python_value(columns[key], value)
    return values


def _python_value(column: sa.Column, value: Any) -> Any:
    col_type = column.type
    if isinstance(col_type, JSONList):
        if value is None:
            return None if column.nullable else []
        return decode_list(value)
    if isinstance(col_type, JSONObject):
        return None if value is None else decode_object(value)
    if value is None:
        return None
    if value == "" and not isinstance(col_type, sa.String):
        return None
    if isinstance(col_type, sa.DateTime):
        return parse_datetime(value)
    if isinstance(col_type, sa.Date):
        return parse_date(value)
    if isinstance(col_type, sa.Boolean):
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)
    if isinstance(col_type, sa.Integer):
        return int(value)
    if isinstance(col_type, (sa.Float, sa.Numeric)):
        return float(value)
    return value


def to_sqlite_values(columns: Mapping[str, sa.Column], values: Mapping[str, Any]) -> dict:
    """Python-typed column values -> text/number values for the embedded store."""
    encoded: dict[str, Any] = {}
    for key, value in values.items():
        col_type = columns[key].type
        if isinstance(col_type, JSONList):
            encoded[key] = None if value is None else encode_list(value)
        elif isinstance(col_type, JSONObject):
            encoded[key] = None if value is None else encode_object(value)
        elif isinstance(value, datetime):
            encoded[key] = value.isoformat()
        elif isinstance(value, date):
            encoded[key] = value.isoformat()
        elif isinstance(value, bool):
            encoded[key] = int(value)
        else:
            encoded[key] = value
    return encoded
