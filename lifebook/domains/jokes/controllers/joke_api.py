"""Jokes JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from lifebook.core.auth.actor import current_actor
from lifebook.domains.jokes.schemas.joke_schemas import (
    JokeCreate,
    JokeGenerate,
    JokeIterate,
    JokeListFilter,
    JokeTold,
    JokeUpdate,
)
from lifebook.domains.jokes.services import joke_service

joke_api_bp = Blueprint("joke_api", __name__)


def _body() -> dict:
    return request.get_json(silent=True) or {}


@joke_api_bp.get("")
@jwt_required()
def list_jokes():
    filters = JokeListFilter.model_validate(request.args.to_dict())
    return jsonify({"ok": True, "jokes": joke_service.list_jokes(current_actor().user_id, filters.category)})


@joke_api_bp.get("/<int:joke_id>")
@jwt_required()
def get_joke(joke_id: int):
    return jsonify({"ok": True, "joke": joke_service.get_joke(current_actor().user_id, joke_id)})


@joke_api_bp.post("")
@jwt_required()
def create_joke():
    data = JokeCreate.model_validate(_body())
    return jsonify({"ok": True, "joke": joke_service.create_joke(current_actor().user_id, data)}), 201


@joke_api_bp.route("/<int:joke_id>", methods=["PUT", "PATCH"])
@jwt_required()
def update_joke(joke_id: int):
    data = JokeUpdate.model_validate(_body())
    return jsonify({"ok": True, "joke": joke_service.update_joke(current_actor().user_id, joke_id, data)})


@joke_api_bp.delete("/<int:joke_id>")
@jwt_required()
def delete_joke(joke_id: int):
    joke_service.delete_joke(current_actor().user_id, joke_id)
    return jsonify({"ok": True})


@joke_api_bp.post("/<int:joke_id>/told")
@jwt_required()
def mark_told(joke_id: int):
    data = JokeTold.model_validate(_body())
    joke = joke_service.mark_told(current_actor().user_id, joke_id, data.success_rating)
    return jsonify({"ok": True, "joke": joke})


@joke_api_bp.post("/<int:joke_id>/tag-person/<int:person_id>")
@jwt_required()
def tag_person(joke_id: int, person_id: int):
    link = joke_service.tag_person(current_actor().user_id, joke_id, person_id)
    return jsonify({"ok": True, "link": link}), 201


@joke_api_bp.delete("/<int:joke_id>/tag-person/<int:person_id>")
@jwt_required()
def untag_person(joke_id: int, person_id: int):
    joke_service.untag_person(current_actor().user_id, joke_id, person_id)
    return jsonify({"ok": True})


@joke_api_bp.get("/person/<int:person_id>")
@jwt_required()
def jokes_for_person(person_id: int):
    return jsonify({"ok": True, "jokes": joke_service.jokes_for_person(current_actor().user_id, person_id)})


@joke_api_bp.post("/generate")
@jwt_required()
def generate_joke():
    data = JokeGenerate.model_validate(_body())
    joke = joke_service.generate(current_actor().user_id, data)
    if joke is None:
        return jsonify({"ok": False, "error": "llm_unavailable", "message": "Joke generation is unavailable"}), 503
    return jsonify({"ok": True, "joke": joke})


@joke_api_bp.post("/<int:joke_id>/iterate")
@jwt_required()
def iterate_joke(joke_id: int):
    data = JokeIterate.model_validate(_body())
    iteration = joke_service.iterate(current_actor().user_id, joke_id, data)
    if iteration is None:
        return jsonify({"ok": False, "error": "llm_unavailable", "message": "Joke iteration is unavailable"}), 503
    return jsonify({"ok": True, **iteration})
