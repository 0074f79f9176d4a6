"""Wellness JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from lifebook.core.auth.actor import current_actor
from lifebook.core.errors import ValidationFailed
from lifebook.domains.wellness.schemas.wellness_schemas import (
    WellnessEntryUpsert,
    WellnessListFilter,
    WellnessPresetSave,
)
from lifebook.domains.wellness.services import import_service, wellness_service

wellness_api_bp = Blueprint("wellness_api", __name__)


@wellness_api_bp.get("")
@jwt_required()
def list_wellness():
    filters = WellnessListFilter.model_validate(request.args.to_dict())
    entries = wellness_service.list_entries(
        current_actor().user_id, start=filters.start, end=filters.end, limit=filters.limit
    )
    return jsonify({"ok": True, "wellness": entries})


@wellness_api_bp.post("")
@jwt_required()
def upsert_wellness():
    data = WellnessEntryUpsert.model_validate(request.get_json(silent=True) or {})
    entry = wellness_service.upsert_entry(current_actor().user_id, data)
    return jsonify({"ok": True, "entry": entry})


@wellness_api_bp.delete("/<int:entry_id>")
@jwt_required()
def delete_wellness(entry_id: int):
    wellness_service.delete_entry(current_actor().user_id, entry_id)
    return jsonify({"ok": True})


@wellness_api_bp.get("/preset")
@jwt_required()
def get_preset():
    return jsonify({"ok": True, "preset": wellness_service.get_preset(current_actor().user_id)})


@wellness_api_bp.post("/preset")
@jwt_required()
def save_preset():
    data = WellnessPresetSave.model_validate(request.get_json(silent=True) or {})
    preset = wellness_service.save_preset(current_actor().user_id, data)
    return jsonify({"ok": True, "preset": preset})


@wellness_api_bp.get("/correlations")
@jwt_required()
def correlations():
    return jsonify({"ok": True, **wellness_service.correlations(current_actor().user_id)})


@wellness_api_bp.post("/import")
@jwt_required()
def import_csv():
    """Accept a multipart ``file`` or a JSON body ``{"csv": "..."}``."""
    upload = request.files.get("file")
    if upload is not None:
        text = import_service.read_text(upload)
    else:
        text = (request.get_json(silent=True) or {}).get("csv") or ""
    if not text.strip():
        raise ValidationFailed("file", "csv file or text is required")
    imported, errors = import_service.import_csv(current_actor().user_id, text)
    return jsonify({"ok": True, "imported": imported, "errors": errors})
