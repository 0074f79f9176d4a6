"""One-per-user records: identity vision and dating profile."""

from __future__ import annotations

from lifebook.core import records
from lifebook.domains.personal.schemas.personal_schemas import DatingProfileSave, IdentitySave

IDENTITY = "identity_visions"
DATING = "dating_profiles"

_PUBLIC_FIELDS = {
    IDENTITY: ("vision", "core_values", "principles", "updated_at"),
    DATING: (
        "partner_vision",
        "must_haves",
        "nice_to_haves",
        "red_flags",
        "self_reflection_answers",
        "updated_at",
    ),
}


def _shape(entity: str, record: dict) -> dict:
    return {field: record.get(field) for field in _PUBLIC_FIELDS[entity]}


def get_identity(user_id: int) -> dict:
    record = records.find_owned(IDENTITY, user_id)
    if record is None:
        return {**IdentitySave().model_dump(), "updated_at": None}
    return _shape(IDENTITY, record)


def save_identity(user_id: int, data: IdentitySave) -> dict:
    return _shape(IDENTITY, records.upsert_owned(IDENTITY, user_id, data.model_dump()))


def get_dating_profile(user_id: int) -> dict:
    record = records.find_owned(DATING, user_id)
    if record is None:
        return {**DatingProfileSave().model_dump(), "updated_at": None}
    return _shape(DATING, record)


def save_dating_profile(user_id: int, data: DatingProfileSave) -> dict:
    return _shape(DATING, records.upsert_owned(DATING, user_id, data.model_dump()))
