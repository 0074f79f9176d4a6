"""Identity vision, dating profile and genome uploads."""

from __future__ import annotations

from flask import Blueprint, jsonify, request, send_file
from flask_jwt_extended import jwt_required

from lifebook.core.auth.actor import current_actor
from lifebook.domains.personal.schemas.personal_schemas import DatingProfileSave, IdentitySave
from lifebook.domains.personal.services import genome_service, profile_service

identity_api_bp = Blueprint("identity_api", __name__)
dating_api_bp = Blueprint("dating_api", __name__)
genome_api_bp = Blueprint("genome_api", __name__)


@identity_api_bp.get("")
@jwt_required()
def get_identity():
    return jsonify({"ok": True, "identity": profile_service.get_identity(current_actor().user_id)})


@identity_api_bp.post("")
@jwt_required()
def save_identity():
    data = IdentitySave.model_validate(request.get_json(silent=True) or {})
    return jsonify({"ok": True, "identity": profile_service.save_identity(current_actor().user_id, data)})


@dating_api_bp.get("")
@jwt_required()
def get_dating_profile():
    return jsonify({"ok": True, "profile": profile_service.get_dating_profile(current_actor().user_id)})


@dating_api_bp.post("")
@jwt_required()
def save_dating_profile():
    data = DatingProfileSave.model_validate(request.get_json(silent=True) or {})
    profile = profile_service.save_dating_profile(current_actor().user_id, data)
    return jsonify({"ok": True, "profile": profile})


@genome_api_bp.get("")
@jwt_required()
def list_genome_uploads():
    return jsonify({"ok": True, "uploads": genome_service.list_uploads(current_actor().user_id)})


@genome_api_bp.post("/upload")
@jwt_required()
def upload_genome():
    upload = genome_service.add_upload(current_actor().user_id, request.files.get("file"))
    return jsonify({"ok": True, "upload": upload}), 201


@genome_api_bp.get("/<int:upload_id>/download")
@jwt_required()
def download_genome(upload_id: int):
    path, record = genome_service.download_path(current_actor().user_id, upload_id)
    return send_file(
        path,
        mimetype=record.get("mime_type") or "application/octet-stream",
        as_attachment=True,
        download_name=record["original_name"],
    )


@genome_api_bp.delete("/<int:upload_id>")
@jwt_required()
def delete_genome(upload_id: int):
    genome_service.delete_upload(current_actor().user_id, upload_id)
    return jsonify({"ok": True})
