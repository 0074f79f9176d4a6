"""Wellness log: upsert by date, presets and mood correlations."""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from lifebook.core import records
from lifebook.core.errors import LifebookError
from lifebook.domains.wellness.ml.correlation import compute_correlations
from lifebook.domains.wellness.schemas.wellness_schemas import WellnessEntryUpsert, WellnessPresetSave

logger = logging.getLogger(__name__)

ENTRIES = "wellness_entries"
PRESETS = "wellness_presets"
BODY_METRICS = ("weight_kg", "height_cm", "bmi", "body_fat_percent")
CORRELATION_WINDOW = 180


def list_entries(
    user_id: int, start: Optional[date] = None, end: Optional[date] = None, limit: int = 90
) -> List[dict]:
    """Entries within the given bounds newest first, or the latest ``limit`` when neither is given.

    Either bound may be given alone; both are inclusive.
    """
    filters = {}
    if start:
        filters["date__gte"] = start
    if end:
        filters["date__lte"] = end
    if filters:
        return records.list_owned(ENTRIES, user_id, filters=filters, order_by=("-date",))
    return records.list_owned(ENTRIES, user_id, order_by=("-date",), limit=limit)


def upsert_entry(user_id: int, data: WellnessEntryUpsert) -> dict:
    """One entry per (user, date): an existing day is updated in place."""
    payload = data.model_dump()
    entry = records.upsert_owned(ENTRIES, user_id, payload, conflict_keys=("user_id", "date"))
    _remember_body_metrics(user_id, payload)
    return entry


def _remember_body_metrics(user_id: int, payload: dict) -> None:
    metrics = {key: payload[key] for key in BODY_METRICS if payload.get(key) is not None}
    if not metrics:
        return
    try:
        records.upsert_owned(PRESETS, user_id, metrics)
    except LifebookError as exc:
        # The entry itself is stored; the preset is a convenience.
        logger.warning("Could not update wellness preset for user %s: %s", user_id, exc)


def delete_entry(user_id: int, entry_id: int) -> None:
    records.delete_owned(ENTRIES, user_id, entry_id, label="wellness_entry")


def get_preset(user_id: int) -> dict:
    preset = records.find_owned(PRESETS, user_id)
    if preset is None:
        return {
            "supplements": [],
            "medication": [],
            "diet_items": [],
            **{key: None for key in BODY_METRICS},
        }
    return preset


def save_preset(user_id: int, data: WellnessPresetSave) -> dict:
    return records.upsert_owned(PRESETS, user_id, data.model_dump())


def correlations(user_id: int) -> dict:
    wellness = records.list_owned(ENTRIES, user_id, order_by=("-date",), limit=CORRELATION_WINDOW)
    journal = records.list_owned("journal_entries", user_id, order_by=("created_at",))
    return compute_correlations(wellness, journal)
