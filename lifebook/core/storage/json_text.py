"""JSON-as-text codecs for list and object columns.

Both stores keep list-valued attributes as JSON-encoded text. Decoding is
best-effort: legacy comma separated values and malformed JSON are tolerated
rather than raised.
"""

from __future__ import annotations

import json
from typing import Any, Mapping


def encode_list(value: Any) -> str:
    return json.dumps(decode_list(value))


def decode_list(value: Any) -> list:
    """Best-effort decode of a stored list column. Never raises."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    if not isinstance(value, str):
        return [value]
    text = value.strip()
    if not text:
        return []
    try:
        parsed = json.loads(text)
    except ValueError:
        # Legacy rows stored comma separated text.
        parts = [part.strip() for part in text.split(",") if part.strip()]
        return parts or [text]
    if isinstance(parsed, list):
        return parsed
    if parsed is None:
        return []
    return [parsed]


def encode_object(value: Any) -> str:
    return json.dumps(decode_object(value))


def decode_object(value: Any) -> dict:
    """Best-effort decode of a stored JSON object column. Never raises."""
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    if not isinstance(value, str) or not value.strip():
        return {}
    try:
        parsed = json.loads(value)
    except ValueError:
        return {"raw": value}
    return parsed if isinstance(parsed, dict) else {"value": parsed}
