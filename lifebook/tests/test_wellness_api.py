"""Wellness API: daily upsert, presets, correlations and CSV import."""

from __future__ import annotations

import io
from datetime import date

import pytest

from lifebook.core import records
from lifebook.domains.wellness.services.import_service import map_row, parse_csv

pytestmark = pytest.mark.integration


def _log(client, headers, day, **fields):
    return client.post("/api/wellness", json={"date": day, **fields}, headers=headers)


def test_upsert_by_date_updates_in_place(client, auth_headers):
    first = _log(client, auth_headers, "2024-07-01", exercise_minutes=30, supplements="zinc, magnesium")
    second = _log(client, auth_headers, "01/07/2024", exercise_minutes=50, supplements=["zinc"])

    assert first.status_code == 200
    assert first.get_json()["entry"]["supplements"] == ["zinc", "magnesium"]
    assert second.get_json()["entry"]["id"] == first.get_json()["entry"]["id"]

    entries = client.get("/api/wellness", headers=auth_headers).get_json()["wellness"]
    assert len(entries) == 1
    assert entries[0]["exercise_minutes"] == 50
    assert entries[0]["date"] == "2024-07-01"


def test_upsert_validates_ranges(client, auth_headers):
    assert _log(client, auth_headers, "2024-07-01", sleep_quality=9).status_code == 400
    assert _log(client, auth_headers, "not a date").status_code == 400
    assert client.post("/api/wellness", json={}, headers=auth_headers).status_code == 400


def test_list_with_range(client, auth_headers):
    for day in ("2024-07-01", "2024-07-05", "2024-07-10"):
        _log(client, auth_headers, day)
    entries = client.get("/api/wellness?start=2024-07-02&end=2024-07-10", headers=auth_headers).get_json()[
        "wellness"
    ]
    assert [entry["date"] for entry in entries] == ["2024-07-10", "2024-07-05"]


@pytest.mark.parametrize(
    "query, expected",
    [
        ("start=2024-07-05", ["2024-07-10", "2024-07-05"]),
        ("end=2024-07-05", ["2024-07-05", "2024-07-01"]),
    ],
)
def test_list_with_one_bound(client, auth_headers, query, expected):
    for day in ("2024-07-01", "2024-07-05", "2024-07-10"):
        _log(client, auth_headers, day)
    entries = client.get(f"/api/wellness?{query}", headers=auth_headers).get_json()["wellness"]
    assert [entry["date"] for entry in entries] == expected


def test_body_metrics_are_remembered_in_preset(client, auth_headers):
    empty = client.get("/api/wellness/preset", headers=auth_headers).get_json()["preset"]
    assert empty["supplements"] == []
    assert empty["weight_kg"] is None

    _log(client, auth_headers, "2024-07-01", weight_kg=71.5, bmi=22.4)
    preset = client.get("/api/wellness/preset", headers=auth_headers).get_json()["preset"]
    assert preset["weight_kg"] == 71.5
    assert preset["bmi"] == 22.4


def test_save_preset(client, auth_headers):
    resp = client.post(
        "/api/wellness/preset",
        json={"supplements": ["omega 3"], "medication": "", "height_cm": 180},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    preset = resp.get_json()["preset"]
    assert preset["supplements"] == ["omega 3"]
    assert preset["medication"] == []
    assert preset["height_cm"] == 180.0


def test_delete_entry(client, auth_headers, other_headers):
    entry_id = _log(client, auth_headers, "2024-07-01").get_json()["entry"]["id"]
    assert client.delete(f"/api/wellness/{entry_id}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/wellness/{entry_id}", headers=auth_headers).status_code == 200
    assert client.get("/api/wellness", headers=auth_headers).get_json()["wellness"] == []


def test_correlations_pair_mood_with_wellness(client, auth_headers, app, user):
    days = [("2024-07-01", "happy", 60), ("2024-07-02", "sad", 0), ("2024-07-03", "excited", 40)]
    with app.app_context():
        for day, mood, _minutes in days:
            records.create_owned(
                "journal_entries", user["id"], {"content": day, "mood": mood, "created_at": f"{day}T20:00:00"}
            )
    for day, _mood, minutes in days:
        _log(client, auth_headers, day, exercise_minutes=minutes)

    body = client.get("/api/wellness/correlations", headers=auth_headers).get_json()
    assert body["pairs"] == 3
    assert body["correlations"]["exercise_minutes"] > 0.9
    assert body["correlations"]["sleep_quality"] is None


def test_correlations_with_no_data(client, auth_headers):
    body = client.get("/api/wellness/correlations", headers=auth_headers).get_json()
    assert body["pairs"] == 0
    assert all(value is None for value in body["correlations"].values())


# ==================== CSV import ====================

GARMIN_CSV = """Date,Intensity Minutes,Sleep Score,Steps
2024-08-01,35,82,9000
02/08/2024,,61,4000
not-a-date,10,70,100
2024-08-03,"1,200",,
"""


def test_map_row():
    assert map_row({"Calendar Date": "2024-08-01", "Active Minutes": "15", "Sleep Score": "90"}) == {
        "date": date(2024, 8, 1),
        "exercise_minutes": 15,
        "sleep_score": 90,
        "sleep_quality": 4,
    }
    assert map_row({"Steps": "100"}) is None


def test_parse_csv_strips_headers():
    rows = parse_csv(" Date , Sleep Score \n2024-08-01,80\n")
    assert rows == [{"Date": "2024-08-01", "Sleep Score": "80"}]


def test_import_json_body(client, auth_headers):
    resp = client.post("/api/wellness/import", json={"csv": GARMIN_CSV}, headers=auth_headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["imported"] == 3
    assert body["errors"] == [{"row": 3, "error": "missing or invalid date"}]

    entries = {e["date"]: e for e in client.get("/api/wellness", headers=auth_headers).get_json()["wellness"]}
    assert entries["2024-08-01"]["exercise_minutes"] == 35
    assert entries["2024-08-01"]["sleep_quality"] == 4
    assert entries["2024-08-02"]["exercise_minutes"] == 0
    assert entries["2024-08-03"]["exercise_minutes"] == 1200


def test_import_multipart_file(client, auth_headers):
    data = {"file": (io.BytesIO(("\ufeff" + GARMIN_CSV).encode("utf-8")), "garmin.csv")}
    resp = client.post(
        "/api/wellness/import", data=data, headers=auth_headers, content_type="multipart/form-data"
    )
    assert resp.get_json()["imported"] == 3


def test_import_requires_content(client, auth_headers):
    resp = client.post("/api/wellness/import", json={}, headers=auth_headers)
    assert resp.status_code == 400
