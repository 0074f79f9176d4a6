from datetime import date

import pytest

from lifebook.core.storage.operations import OpKind, build_operation
from lifebook.core.storage.registry import dependency_order, get_entity, load_models

pytestmark = pytest.mark.unit


@pytest.fixture(scope="module", autouse=True)
def _models():
    load_models()


def test_filters_are_parsed_and_coerced():
    op = build_operation(
        get_entity("wellness_entries"),
        "list",
        {"user_id": "3", "date__gte": "2024-01-01", "id__in": ["1", "2"]},
    )
    assert op.kind is OpKind.LIST
    assert op.owner_id == 3
    clauses = {(c.field, c.operator): c.value for c in op.clauses}
    assert clauses[("date", "gte")] == date(2024, 1, 1)
    assert clauses[("id", "in")] == (1, 2)
    assert op.order_by == ("-date", "-id")


def test_owner_filter_is_required():
    with pytest.raises(ValueError, match="requires a user_id filter"):
        build_operation(get_entity("journal_entries"), "list", {})


def test_create_requires_owner():
    with pytest.raises(ValueError, match="requires user_id"):
        build_operation(get_entity("journal_entries"), "create", None, {"content": "x"})


def test_unscoped_lookup_only_for_users():
    build_operation(get_entity("users"), "read", {"email": "a@b.c"}, scoped=False)
    with pytest.raises(ValueError):
        build_operation(get_entity("journal_entries"), "read", {"mood": "sad"}, scoped=False)


@pytest.mark.parametrize(
    "filters, payload, message",
    [
        ({"user_id": 1, "colour": "red"}, None, "unknown filter field"),
        ({"user_id": 1, "mood__like": "s"}, None, "unknown filter operator"),
    ],
)
def test_bad_filters(filters, payload, message):
    with pytest.raises(ValueError, match=message):
        build_operation(get_entity("journal_entries"), "list", filters, payload)


def test_unknown_payload_field():
    with pytest.raises(ValueError, match="unknown field"):
        build_operation(get_entity("journal_entries"), "create", None, {"user_id": 1, "colour": "red"})


def test_upsert_needs_conflict_keys_and_values():
    with pytest.raises(ValueError, match="conflict keys"):
        build_operation(get_entity("journal_entries"), "upsert", {"user_id": 1}, {"content": "x"})
    with pytest.raises(ValueError, match="at least one field"):
        build_operation(get_entity("wellness_presets"), "upsert", {"user_id": 1}, {})


def test_conflict_filters_merge_filter_and_payload():
    op = build_operation(
        get_entity("story_people"), "upsert", {"user_id": 7}, {"story_id": 1, "person_id": 2}
    )
    assert op.conflict_filters() == {"story_id": 1, "person_id": 2}
    assert op.equality_filters() == {"user_id": 7}


def test_unknown_order_field():
    with pytest.raises(ValueError, match="unknown order field"):
        build_operation(get_entity("jokes"), "list", {"user_id": 1}, order_by=("-rank",))


def test_unknown_operation_kind():
    with pytest.raises(ValueError):
        build_operation(get_entity("jokes"), "truncate", {"user_id": 1})


def test_dependency_order_puts_parents_first():
    names = [spec.name for spec in dependency_order()]
    assert names.index("users") < names.index("people") < names.index("story_people")
    assert names.index("stories") < names.index("story_people")
    assert names.index("ai_conversations") < names.index("ai_messages")
    assert names.index("journal_entries") < names.index("coach_issues")


def test_only_users_refuse_fallback_creates():
    flagged = [spec.name for spec in dependency_order() if spec.primary_creates_only]
    assert flagged == ["users"]
