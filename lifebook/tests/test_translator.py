from datetime import date, datetime

import pytest

from lifebook.core.storage.registry import get_entity, load_models
from lifebook.core.storage.translator import (
    normalize_payload,
    to_canonical,
    to_iso,
    to_snake,
    to_sqlite_values,
)

pytestmark = pytest.mark.unit


@pytest.fixture(scope="module")
def columns():
    load_models()
    return {
        "journal": get_entity("journal_entries").columns,
        "wellness": get_entity("wellness_entries").columns,
        "topics": get_entity("person_topics").columns,
    }


def test_to_snake():
    assert to_snake("journalEntryId") == "journal_entry_id"
    assert to_snake("created_at") == "created_at"
    assert to_snake("bodyFatPercent") == "body_fat_percent"


def test_to_iso_handles_both_store_formats():
    assert to_iso("2024-03-01 10:11:12") == "2024-03-01T10:11:12"
    assert to_iso("2024-03-01T10:11:12Z") == "2024-03-01T10:11:12"
    assert to_iso(datetime(2024, 3, 1, 10, 11, 12)) == "2024-03-01T10:11:12"
    assert to_iso(None) is None


def test_embedded_row_becomes_canonical(columns):
    row = {
        "id": 4,
        "userId": 2,
        "content": "Long day",
        "mood": "tired",
        "tags": "work,travel",
        "createdAt": "2024-03-01 08:00:00",
        "updatedAt": "2024-03-01 08:00:00",
    }
    record = to_canonical(columns["journal"], row)
    assert record["user_id"] == 2
    assert record["tags"] == ["work", "travel"]
    assert record["created_at"] == "2024-03-01T08:00:00"


def test_canonical_types(columns):
    record = to_canonical(
        columns["wellness"],
        {"id": "1", "user_id": 1, "date": "2024-05-06", "weight_kg": "72.5", "supplements": None},
    )
    assert record["id"] == 1
    assert record["date"] == "2024-05-06"
    assert record["weight_kg"] == 72.5
    assert record["supplements"] == []

    topic = to_canonical(columns["topics"], {"id": 1, "is_used": "1"})
    assert topic["is_used"] is True


def test_normalize_payload_accepts_camel_case(columns):
    values = normalize_payload(columns["wellness"], {"date": "06/05/2024", "exerciseMinutes": "30"})
    assert values == {"date": date(2024, 5, 6), "exercise_minutes": 30}


def test_normalize_payload_rejects_unknown_fields(columns):
    with pytest.raises(KeyError):
        normalize_payload(columns["journal"], {"colour": "blue"})


def test_sqlite_values_encode_json_and_dates(columns):
    encoded = to_sqlite_values(
        columns["wellness"], {"date": date(2024, 5, 6), "supplements": ["zinc"], "bmi": 22.1}
    )
    assert encoded == {"date": "2024-05-06", "supplements": '["zinc"]', "bmi": 22.1}
