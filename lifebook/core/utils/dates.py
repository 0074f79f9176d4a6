"""Date helpers shared by both stores and the import paths."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Optional, Union

_DMY = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


def utcnow() -> datetime:
    """Naive UTC timestamp; both stores persist timestamps without tz info."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    """Parse ``YYYY-MM-DD``, ``DD/MM/YYYY`` or an ISO timestamp into a date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    match = _DMY.match(text)
    if match:
        day, month, year = (int(part) for part in match.groups())
        return date(year, month, day)
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        raise ValueError(f"invalid date: {value!r}") from None


def parse_datetime(value: Union[str, date, datetime, None]) -> Optional[datetime]:
    """Parse the timestamp formats either store may hand back."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo is None else value.astimezone(timezone.utc).replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip().replace(" ", "T", 1)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
