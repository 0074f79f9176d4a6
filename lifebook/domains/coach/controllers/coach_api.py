"""Coach JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from lifebook.core.auth.actor import current_actor
from lifebook.domains.coach.schemas.coach_schemas import (
    CoachIssueListFilter,
    CoachIssueUpdate,
    CoachScanRequest,
)
from lifebook.domains.coach.services import coach_service

coach_api_bp = Blueprint("coach_api", __name__)


@coach_api_bp.post("/scan/<int:journal_entry_id>")
@jwt_required()
def scan_journal(journal_entry_id: int):
    data = CoachScanRequest.model_validate(request.get_json(silent=True) or {})
    issues = coach_service.scan_journal(current_actor().user_id, journal_entry_id, data.content)
    return jsonify({"ok": True, "inserted": len(issues), "issues": issues})


@coach_api_bp.get("/issues")
@jwt_required()
def list_issues():
    filters = CoachIssueListFilter.model_validate(request.args.to_dict())
    return jsonify({"ok": True, "issues": coach_service.list_issues(current_actor().user_id, filters.status)})


@coach_api_bp.patch("/issues/<int:issue_id>")
@jwt_required()
def update_issue(issue_id: int):
    data = CoachIssueUpdate.model_validate(request.get_json(silent=True) or {})
    issue = coach_service.update_issue(current_actor().user_id, issue_id, data)
    return jsonify({"ok": True, "issue": issue})
