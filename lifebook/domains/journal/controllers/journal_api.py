"""Journal JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from lifebook.core.auth.actor import current_actor
from lifebook.core.errors import ValidationFailed
from lifebook.core.utils.dates import parse_date
from lifebook.core.utils.pagination import page_payload
from lifebook.domains.journal.schemas.journal_schemas import (
    JournalEntryCreate,
    JournalEntryListFilter,
    JournalEntryUpdate,
)
from lifebook.domains.journal.services import journal_service

journal_api_bp = Blueprint("journal_api", __name__)


@journal_api_bp.get("")
@jwt_required()
def list_journal():
    filters = JournalEntryListFilter.model_validate(request.args.to_dict())
    entries, total = journal_service.list_entries(
        current_actor().user_id,
        date_from=filters.date_from,
        date_to=filters.date_to,
        mood=filters.mood,
        page=filters.page,
        per_page=filters.per_page,
    )
    return jsonify({"ok": True, **page_payload(entries, total, filters.page, filters.per_page)})


@journal_api_bp.get("/date-range/<start>/<end>")
@jwt_required()
def list_journal_range(start: str, end: str):
    try:
        date_from, date_to = parse_date(start), parse_date(end)
    except ValueError as exc:
        raise ValidationFailed("date", str(exc)) from None
    entries, total = journal_service.list_entries(
        current_actor().user_id, date_from=date_from, date_to=date_to, per_page=100
    )
    return jsonify({"ok": True, "items": entries, "total": total})


@journal_api_bp.get("/<int:entry_id>")
@jwt_required()
def get_entry(entry_id: int):
    return jsonify({"ok": True, "entry": journal_service.get_entry(current_actor().user_id, entry_id)})


@journal_api_bp.post("")
@jwt_required()
def create_journal_entry():
    data = JournalEntryCreate.model_validate(request.get_json(silent=True) or {})
    entry = journal_service.create_entry(current_actor().user_id, data)
    return jsonify({"ok": True, "entry": entry}), 201


@journal_api_bp.route("/<int:entry_id>", methods=["PUT", "PATCH"])
@jwt_required()
def update_journal_entry(entry_id: int):
    data = JournalEntryUpdate.model_validate(request.get_json(silent=True) or {})
    entry = journal_service.update_entry(current_actor().user_id, entry_id, data)
    return jsonify({"ok": True, "entry": entry})


@journal_api_bp.delete("/<int:entry_id>")
@jwt_required()
def delete_journal_entry(entry_id: int):
    journal_service.delete_entry(current_actor().user_id, entry_id)
    return jsonify({"ok": True})


@journal_api_bp.post("/<int:entry_id>/insights")
@jwt_required()
def journal_insights(entry_id: int):
    insights = journal_service.generate_insights(current_actor().user_id, entry_id)
    return jsonify({"ok": True, "insights": insights})
