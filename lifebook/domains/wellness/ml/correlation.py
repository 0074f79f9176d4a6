"""Mood vs. wellness correlation.

Journal moods are mapped to a 1-5 scale, averaged per calendar day and paired
with the wellness entry for the same day. Each metric gets a Pearson
coefficient, or ``None`` when there are fewer than three pairs or either
series is constant.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from lifebook.core.storage.json_text import decode_list
from lifebook.core.utils.dates import parse_date, parse_datetime

MOOD_SCALE: Dict[str, int] = {
    "happy": 5,
    "excited": 5,
    "proud": 4,
    "calm": 4,
    "grateful": 4,
    "tired": 2,
    "confused": 2,
    "anxious": 2,
    "sad": 1,
    "frustrated": 1,
}
UNKNOWN_MOOD = 3
MIN_PAIRS = 3

METRICS: Tuple[str, ...] = (
    "exercise_minutes",
    "exercise_intensity",
    "diet_quality",
    "sleep_quality",
    "sleep_score",
    "supplements_count",
    "medication_count",
)


def mood_score(label: Optional[str]) -> Optional[int]:
    if not label or not str(label).strip():
        return None
    return MOOD_SCALE.get(str(label).strip().lower(), UNKNOWN_MOOD)


def daily_mood(journal_entries: Iterable[Mapping]) -> Dict[date, float]:
    """Mean mood score per calendar date of ``created_at``; moodless entries skipped."""
    buckets: Dict[date, List[int]] = defaultdict(list)
    for entry in journal_entries:
        score = mood_score(entry.get("mood"))
        created = entry.get("created_at")
        if score is None or not created:
            continue
        try:
            day = parse_datetime(created).date()
        except (TypeError, ValueError):
            continue
        buckets[day].append(score)
    return {day: float(np.mean(scores)) for day, scores in buckets.items()}


def metric_value(entry: Mapping, metric: str) -> float:
    """Numeric value of ``metric`` for one wellness entry; missing counts as 0."""
    if metric == "supplements_count":
        return float(len(decode_list(entry.get("supplements"))))
    if metric == "medication_count":
        return float(len(decode_list(entry.get("medication"))))
    value = entry.get(metric)
    try:
        return float(value) if value not in (None, "") else 0.0
    except (TypeError, ValueError):
        return 0.0


def pearson(x: Sequence[float], y: Sequence[float]) -> Optional[float]:
    n = min(len(x), len(y))
    if n < MIN_PAIRS:
        return None
    xs = np.asarray(x[:n], dtype=float)
    ys = np.asarray(y[:n], dtype=float)
    dx = xs - xs.mean()
    dy = ys - ys.mean()
    vx = float(np.dot(dx, dx))
    vy = float(np.dot(dy, dy))
    if vx <= 0.0 or vy <= 0.0:
        return None
    r = float(np.dot(dx, dy)) / float(np.sqrt(vx * vy))
    if not np.isfinite(r):
        return None
    return max(-1.0, min(1.0, r))


def paired_series(
    wellness_entries: Iterable[Mapping], moods: Mapping[date, float]
) -> Tuple[List[Mapping], List[float]]:
    entries: List[Mapping] = []
    mood_values: List[float] = []
    for entry in wellness_entries:
        try:
            day = parse_date(entry.get("date"))
        except ValueError:
            continue
        if day is None or day not in moods:
            continue
        entries.append(entry)
        mood_values.append(moods[day])
    return entries, mood_values


def compute_correlations(
    wellness_entries: Iterable[Mapping], journal_entries: Iterable[Mapping]
) -> Dict[str, object]:
    moods = daily_mood(journal_entries)
    entries, mood_values = paired_series(wellness_entries, moods)
    correlations = {
        metric: pearson([metric_value(entry, metric) for entry in entries], mood_values)
        for metric in METRICS
    }
    return {"correlations": correlations, "pairs": len(entries)}
