"""Practice JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from lifebook.core.auth.actor import current_actor
from lifebook.core.utils.pagination import page_payload
from lifebook.domains.stories.schemas.story_schemas import (
    PracticeFeedbackRequest,
    PracticeListFilter,
    PracticeSessionCreate,
    StarterListFilter,
)
from lifebook.domains.stories.services import practice_service

practice_api_bp = Blueprint("practice_api", __name__)


@practice_api_bp.get("/sessions")
@jwt_required()
def list_sessions():
    filters = PracticeListFilter.model_validate(request.args.to_dict())
    sessions, total = practice_service.list_sessions(
        current_actor().user_id, page=filters.page, per_page=filters.per_page
    )
    return jsonify({"ok": True, **page_payload(sessions, total, filters.page, filters.per_page)})


@practice_api_bp.post("/sessions")
@jwt_required()
def start_session():
    data = PracticeSessionCreate.model_validate(request.get_json(silent=True) or {})
    session = practice_service.start_session(current_actor().user_id, data)
    return jsonify({"ok": True, "session": session}), 201


@practice_api_bp.get("/sessions/<int:session_id>")
@jwt_required()
def get_session(session_id: int):
    return jsonify({"ok": True, "session": practice_service.get_session(current_actor().user_id, session_id)})


@practice_api_bp.post("/feedback")
@jwt_required()
def feedback():
    data = PracticeFeedbackRequest.model_validate(request.get_json(silent=True) or {})
    return jsonify({"ok": True, "feedback": practice_service.feedback(current_actor().user_id, data)})


@practice_api_bp.get("/conversation-starters")
@jwt_required()
def conversation_starters():
    filters = StarterListFilter.model_validate(request.args.to_dict())
    starters = practice_service.list_starters(current_actor().user_id, filters.story_id)
    return jsonify({"ok": True, "conversation_starters": starters})


@practice_api_bp.get("/stats")
@jwt_required()
def stats():
    return jsonify({"ok": True, "stats": practice_service.stats(current_actor().user_id)})
