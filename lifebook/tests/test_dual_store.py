"""Dual-store accessor behaviour: fallback, provisioning, translation, isolation."""

from __future__ import annotations

from datetime import date, datetime

import pytest
import sqlalchemy as sa
from sqlalchemy.exc import OperationalError

from lifebook.core import records
from lifebook.core.errors import NotFound, StorageError
from lifebook.core.storage import StoreState, execute, get_accessor
from lifebook.core.storage.registry import get_entity
from lifebook.core.utils import dates
from lifebook.domains.stories.services import story_service
from lifebook.domains.wellness.schemas.wellness_schemas import WellnessEntryUpsert
from lifebook.domains.wellness.services import wellness_service

pytestmark = pytest.mark.integration


def _entry(user_id: int, content: str = "Walked by the river") -> dict:
    return {"user_id": user_id, "content": content, "mood": "calm", "tags": ["outdoors"]}


# ==================== Store selection ====================


def test_primary_serves_when_healthy(app, user):
    with app.app_context():
        result = execute("journal_entries", "create", None, _entry(user["id"]))
        assert result.state is StoreState.PRIMARY
        assert result.value["tags"] == ["outdoors"]
        assert get_accessor().fallback_counts == {}


def test_embedded_only_when_primary_not_configured(embedded_app):
    with embedded_app.app_context():
        accessor = get_accessor()
        assert accessor.primary.configured is False
        result = execute("journal_entries", "create", None, _entry(1))
        assert result.state is StoreState.SECONDARY
        assert result.fell_back is False
        assert accessor.fallback_counts == {}


def test_unreachable_primary_falls_back_and_is_counted(broken_primary_app, caplog):
    with broken_primary_app.app_context():
        accessor = get_accessor()
        created = execute("journal_entries", "create", None, _entry(5))
        listed = execute("journal_entries", "list", {"user_id": 5})

        assert created.state is StoreState.SECONDARY
        assert created.fell_back is True
        assert created.primary_error is not None
        assert [row["id"] for row in listed.unwrap()] == [created.value["id"]]
        assert accessor.fallback_counts["journal_entries"] == 2
        assert accessor.status()["fallback_total"] == 2
    assert "falling back to embedded store" in caplog.text


def test_both_stores_failing_reports_storage_error(broken_primary_app, monkeypatch):
    def _fail(_operation):
        raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

    with broken_primary_app.app_context():
        monkeypatch.setattr(get_accessor().secondary, "run", _fail)
        result = execute("journal_entries", "list", {"user_id": 5})

        assert result.state is StoreState.BOTH_FAILED
        assert result.ok is False
        with pytest.raises(StorageError) as excinfo:
            result.unwrap()
        assert excinfo.value.primary_error is not None
        assert "disk I/O error" in str(excinfo.value.secondary_error)
        assert excinfo.value.hint


def test_storage_error_maps_to_503(broken_primary_app, monkeypatch, token_headers):
    def _fail(_operation):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    client = broken_primary_app.test_client()
    headers = token_headers(broken_primary_app, {"id": 5, "email": "five@example.com"})
    with broken_primary_app.app_context():
        monkeypatch.setattr(get_accessor().secondary, "run", _fail)

    resp = client.post("/api/journal", json={"content": "Lost?"}, headers=headers)

    assert resp.status_code == 503
    body = resp.get_json()
    assert body["error"] == "storage_error"
    assert "locked" in body["hint"]
    assert body["secondary_error"].startswith("OperationalError")


def test_invalid_operation_never_reaches_a_store(broken_primary_app):
    with broken_primary_app.app_context():
        with pytest.raises(ValueError):
            execute("journal_entries", "list", {})
        with pytest.raises(ValueError):
            execute("journal_entries", "create", None, {"user_id": 1, "colour": "red"})
        assert get_accessor().fallback_counts == {}


# ==================== Embedded store ====================


def test_tables_are_provisioned_once_per_process(embedded_app):
    with embedded_app.app_context():
        for index in range(5):
            execute("journal_entries", "create", None, _entry(1, f"entry {index}")).unwrap()
            execute("journal_entries", "list", {"user_id": 1}).unwrap()
        runs = get_accessor().provisioner.runs
        assert runs[("secondary", "journal_entries")] == 1
        assert runs[("secondary", "users")] == 1


def test_shadow_user_satisfies_foreign_key(embedded_app):
    with embedded_app.app_context():
        execute("journal_entries", "create", None, _entry(42)).unwrap()
        user = execute("users", "read", {"id": 42}).unwrap()
        assert user["email"] == "user-42@shadow.lifebook"


def test_legacy_rows_are_translated(embedded_app):
    with embedded_app.app_context():
        accessor = get_accessor()
        accessor.provisioner.ensure(get_entity("journal_entries"), accessor.secondary.engine)
        accessor.secondary.ensure_shadow_user(3)
        with accessor.secondary.engine.begin() as conn:
            conn.execute(
                sa.text(
                    "INSERT INTO journal_entries (user_id, content, mood, tags, created_at, updated_at) "
                    "VALUES (3, 'old row', 'happy', 'gym, friends', '2024-01-02 03:04:05', "
                    "'2024-01-02 03:04:05')"
                )
            )

        (record,) = records.list_owned("journal_entries", 3)
        assert record["tags"] == ["gym", "friends"]
        assert record["created_at"] == "2024-01-02T03:04:05"


def test_embedded_join_rows_carry_owner(embedded_app):
    with embedded_app.app_context():
        story = records.create_owned("stories", 9, {"title": "Ferry", "content": "Missed it twice"})
        person = records.create_owned("people", 9, {"name": "Sam"})

        first = story_service.tag_person(9, story["id"], person["id"])
        again = story_service.tag_person(9, story["id"], person["id"])

        assert first["id"] == again["id"]
        assert first["user_id"] == 9
        assert [p["name"] for p in story_service.people_for_story(9, story["id"])] == ["Sam"]


# ==================== Both stores ====================


def test_records_are_isolated_per_user(any_store_app, user_factory):
    alice = user_factory(any_store_app, email="alice@example.com", name="Alice")["id"]
    bob = user_factory(any_store_app, email="bob@example.com", name="Bob")["id"]

    with any_store_app.app_context():
        owner = records.create_owned("journal_entries", alice, {"content": "mine"})
        records.create_owned("journal_entries", bob, {"content": "theirs"})

        assert [r["content"] for r in records.list_owned("journal_entries", bob)] == ["theirs"]
        with pytest.raises(NotFound):
            records.get_owned("journal_entries", bob, owner["id"])
        with pytest.raises(NotFound):
            records.update_owned("journal_entries", bob, owner["id"], {"content": "hijack"})
        with pytest.raises(NotFound):
            records.delete_owned("journal_entries", bob, owner["id"])
        assert records.get_owned("journal_entries", alice, owner["id"])["content"] == "mine"
        assert get_accessor().fallback_counts == {}


def test_wellness_upsert_keeps_one_row_per_day(any_store_app, user_factory, monkeypatch):
    user_id = user_factory(any_store_app)["id"]

    with any_store_app.app_context():
        monkeypatch.setattr(dates, "utcnow", lambda: datetime(2024, 6, 1, 8, 0))
        first = wellness_service.upsert_entry(
            user_id, WellnessEntryUpsert(date=date(2024, 6, 1), exercise_minutes=20, supplements=["zinc"])
        )
        monkeypatch.setattr(dates, "utcnow", lambda: datetime(2024, 6, 1, 21, 0))
        second = wellness_service.upsert_entry(
            user_id, WellnessEntryUpsert(date="2024-06-01", exercise_minutes=45, sleep_quality=4)
        )

        assert second["id"] == first["id"]
        assert second["exercise_minutes"] == 45
        assert second["sleep_quality"] == 4
        assert second["supplements"] == []
        assert second["created_at"] == first["created_at"] == "2024-06-01T08:00:00"
        assert second["updated_at"] == "2024-06-01T21:00:00"
        assert records.count_owned("wellness_entries", user_id) == 1


def test_count_and_range_filters(any_store_app, user_factory):
    user_id = user_factory(any_store_app)["id"]

    with any_store_app.app_context():
        for day in (1, 2, 3, 10):
            records.upsert_owned(
                "wellness_entries", user_id, {"date": date(2024, 6, day)}, conflict_keys=("user_id", "date")
            )
        in_range = wellness_service.list_entries(user_id, start=date(2024, 6, 2), end=date(2024, 6, 9))
        assert [row["date"] for row in in_range] == ["2024-06-03", "2024-06-02"]
        assert records.count_owned("wellness_entries", user_id, filters={"date__gt": "2024-06-02"}) == 2


def test_user_creation_does_not_fall_back(broken_primary_app):
    with broken_primary_app.app_context():
        result = execute("users", "create", None, {"email": "late@example.com", "name": "Late"})

        assert result.state is StoreState.BOTH_FAILED
        assert result.secondary_error is None
        assert "users" not in get_accessor().fallback_counts
        with pytest.raises(StorageError):
            result.unwrap()
