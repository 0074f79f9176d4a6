"""CRUD blueprints for goals, beliefs, triggers and protocols."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from lifebook.core.auth.actor import current_actor
from lifebook.domains.personal.services import collection_service
from lifebook.domains.personal.services.collection_service import OwnedCollection


def make_collection_blueprint(collection: OwnedCollection) -> Blueprint:
    """One blueprint per collection; responses key records by the collection name."""
    bp = Blueprint(f"{collection.plural}_api", __name__)
    single = collection.label

    @bp.get("")
    @jwt_required()
    def list_records():
        value = request.args.get(collection.filter_field) if collection.filter_field else None
        items = collection.list_records(current_actor().user_id, value)
        return jsonify({"ok": True, collection.plural: items})

    @bp.get("/<int:record_id>")
    @jwt_required()
    def get_record(record_id: int):
        return jsonify({"ok": True, single: collection.get(current_actor().user_id, record_id)})

    @bp.post("")
    @jwt_required()
    def create_record():
        data = collection.create_schema.model_validate(request.get_json(silent=True) or {})
        return jsonify({"ok": True, single: collection.create(current_actor().user_id, data)}), 201

    @bp.route("/<int:record_id>", methods=["PUT", "PATCH"])
    @jwt_required()
    def update_record(record_id: int):
        data = collection.update_schema.model_validate(request.get_json(silent=True) or {})
        return jsonify({"ok": True, single: collection.update(current_actor().user_id, record_id, data)})

    @bp.delete("/<int:record_id>")
    @jwt_required()
    def delete_record(record_id: int):
        collection.delete(current_actor().user_id, record_id)
        return jsonify({"ok": True})

    return bp


goals_api_bp = make_collection_blueprint(collection_service.goals)
beliefs_api_bp = make_collection_blueprint(collection_service.beliefs)
triggers_api_bp = make_collection_blueprint(collection_service.triggers)
protocols_api_bp = make_collection_blueprint(collection_service.protocols)
