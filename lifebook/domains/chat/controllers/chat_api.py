"""Chat JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from lifebook.core.auth.actor import current_actor
from lifebook.domains.chat.schemas.chat_schemas import ChatMessageRequest
from lifebook.domains.chat.services import chat_service

chat_api_bp = Blueprint("chat_api", __name__)


@chat_api_bp.get("/conversations")
@jwt_required()
def list_conversations():
    return jsonify({"ok": True, "conversations": chat_service.list_conversations(current_actor().user_id)})


@chat_api_bp.get("/conversations/<int:conversation_id>/messages")
@jwt_required()
def list_messages(conversation_id: int):
    messages = chat_service.list_messages(current_actor().user_id, conversation_id)
    return jsonify({"ok": True, "messages": messages})


@chat_api_bp.post("/message")
@jwt_required()
def send_message():
    data = ChatMessageRequest.model_validate(request.get_json(silent=True) or {})
    return jsonify({"ok": True, **chat_service.send_message(current_actor().user_id, data)})


@chat_api_bp.delete("/conversations/<int:conversation_id>")
@jwt_required()
def delete_conversation(conversation_id: int):
    chat_service.delete_conversation(current_actor().user_id, conversation_id)
    return jsonify({"ok": True})
