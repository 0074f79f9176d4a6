"""Auth HTTP controllers (API only)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from lifebook.core.auth.actor import current_actor
from lifebook.core.auth.auth_service import authenticate_user, get_user, issue_token, register_user
from lifebook.core.auth.schemas import LoginRequest, RegisterRequest, serialize_user
from lifebook.extensions import limiter

auth_bp = Blueprint("auth_api", __name__)


@auth_bp.post("/register")
@limiter.limit("5/minute")
def register():
    data = RegisterRequest.model_validate(request.get_json(silent=True) or {})
    user = register_user(data)
    return (
        jsonify({"ok": True, "token": issue_token(user), "user": serialize_user(user).model_dump()}),
        201,
    )


@auth_bp.post("/login")
@limiter.limit("10/minute")
def login():
    data = LoginRequest.model_validate(request.get_json(silent=True) or {})
    user = authenticate_user(data)
    if not user:
        return jsonify({"ok": False, "error": "invalid_credentials", "message": "Invalid credentials"}), 401
    return jsonify({"ok": True, "token": issue_token(user), "user": serialize_user(user).model_dump()})


@auth_bp.get("/me")
@jwt_required()
def me():
    user = get_user(current_actor().user_id)
    return jsonify({"ok": True, "user": serialize_user(user).model_dump()})
