"""CSV import for device exports (Garmin-style daily summaries).

Headers are matched by name; each row with a date is upserted into the
wellness log for that day. Bad rows are reported, not fatal.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from typing import List, Optional, Tuple

from lifebook.core import records
from lifebook.core.errors import LifebookError
from lifebook.core.utils.dates import parse_date

logger = logging.getLogger(__name__)

MAX_ROWS = 2000

_DATE_HEADERS = ("Date", "Calendar Date", "calendarDate", "Activity Date", "date")
_EXERCISE_HEADERS = ("Intensity Minutes", "Active Minutes", "Moderate Intensity Minutes", "exercise_minutes")
_ACTIVE_TIME_HEADERS = ("Active Time", "Active time (min)")
_SLEEP_SCORE_HEADERS = ("Sleep Score", "Average Sleep Score", "sleepScore", "sleep_score")
_NUMERIC = re.compile(r"[^0-9.\-]")


def _first(row: dict, headers) -> Optional[str]:
    for header in headers:
        value = row.get(header)
        if value not in (None, ""):
            return value
    return None


def _number(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    cleaned = _NUMERIC.sub("", str(value))
    try:
        return int(round(float(cleaned)))
    except ValueError:
        return None


def map_row(row: dict) -> Optional[dict]:
    """Wellness fields for one CSV row, or ``None`` when the row has no usable date."""
    raw_date = _first(row, _DATE_HEADERS)
    try:
        day = parse_date(raw_date)
    except ValueError:
        return None
    if day is None:
        return None
    exercise = _number(_first(row, _EXERCISE_HEADERS)) or _number(_first(row, _ACTIVE_TIME_HEADERS)) or 0
    sleep_score = _number(_first(row, _SLEEP_SCORE_HEADERS))
    sleep_quality = max(1, min(5, round(sleep_score / 20))) if sleep_score else None
    return {
        "date": day,
        "exercise_minutes": exercise,
        "sleep_score": sleep_score,
        "sleep_quality": sleep_quality,
    }


def read_text(file_obj) -> str:
    content = file_obj.read()
    if isinstance(content, bytes):
        content = content.decode("utf-8-sig", errors="replace")
    return content


def parse_csv(text: str) -> List[dict]:
    reader = csv.DictReader(io.StringIO(text))
    if reader.fieldnames:
        reader.fieldnames = [name.strip() for name in reader.fieldnames]
    rows = []
    for idx, row in enumerate(reader, start=1):
        if idx > MAX_ROWS:
            break
        rows.append(row)
    return rows


def import_csv(user_id: int, text: str) -> Tuple[int, List[dict]]:
    """Upsert one wellness entry per dated row. Returns (imported, errors)."""
    imported = 0
    errors: List[dict] = []
    for idx, row in enumerate(parse_csv(text), start=1):
        mapped = map_row(row)
        if mapped is None:
            errors.append({"row": idx, "error": "missing or invalid date"})
            continue
        try:
            records.upsert_owned("wellness_entries", user_id, mapped, conflict_keys=("user_id", "date"))
            imported += 1
        except LifebookError as exc:
            logger.warning("Wellness import row %s failed: %s", idx, exc)
            errors.append({"row": idx, "error": exc.message})
    logger.info("Imported %s wellness rows for user %s", imported, user_id)
    return imported, errors
