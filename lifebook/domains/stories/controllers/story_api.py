"""Stories JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from lifebook.core.auth.actor import current_actor
from lifebook.core.utils.pagination import page_payload
from lifebook.domains.stories.schemas.story_schemas import (
    StoryCreate,
    StoryListFilter,
    StoryPersonLink,
    StoryRefine,
    StoryTold,
    StoryUpdate,
)
from lifebook.domains.stories.services import story_service

story_api_bp = Blueprint("story_api", __name__)


def _body() -> dict:
    return request.get_json(silent=True) or {}


@story_api_bp.get("")
@jwt_required()
def list_stories():
    filters = StoryListFilter.model_validate(request.args.to_dict())
    stories, total = story_service.list_stories(
        current_actor().user_id, tone=filters.tone, page=filters.page, per_page=filters.per_page
    )
    return jsonify({"ok": True, **page_payload(stories, total, filters.page, filters.per_page)})


@story_api_bp.get("/<int:story_id>")
@jwt_required()
def get_story(story_id: int):
    return jsonify({"ok": True, "story": story_service.get_story(current_actor().user_id, story_id)})


@story_api_bp.post("")
@jwt_required()
def create_story():
    data = StoryCreate.model_validate(_body())
    story = story_service.create_story(current_actor().user_id, data)
    return jsonify({"ok": True, "story": story}), 201


@story_api_bp.route("/<int:story_id>", methods=["PUT", "PATCH"])
@jwt_required()
def update_story(story_id: int):
    data = StoryUpdate.model_validate(_body())
    story = story_service.update_story(current_actor().user_id, story_id, data)
    return jsonify({"ok": True, "story": story})


@story_api_bp.delete("/<int:story_id>")
@jwt_required()
def delete_story(story_id: int):
    story_service.delete_story(current_actor().user_id, story_id)
    return jsonify({"ok": True})


@story_api_bp.post("/<int:story_id>/told")
@jwt_required()
def mark_told(story_id: int):
    data = StoryTold.model_validate(_body())
    story = story_service.mark_told(current_actor().user_id, story_id, data.success_rating)
    return jsonify({"ok": True, "story": story})


@story_api_bp.post("/extract/<int:journal_id>")
@jwt_required()
def extract_stories(journal_id: int):
    stories = story_service.extract_from_journal(current_actor().user_id, journal_id)
    return jsonify({"ok": True, "stories": stories})


@story_api_bp.post("/<int:story_id>/refine")
@jwt_required()
def refine_story(story_id: int):
    data = StoryRefine.model_validate(_body())
    story = story_service.refine_story(current_actor().user_id, story_id, data)
    return jsonify({"ok": True, "story": story})


@story_api_bp.post("/<int:story_id>/conversation-starters")
@jwt_required()
def generate_starters(story_id: int):
    starters = story_service.generate_starters(current_actor().user_id, story_id)
    return jsonify({"ok": True, "conversation_starters": starters})


@story_api_bp.get("/<int:story_id>/people")
@jwt_required()
def story_people(story_id: int):
    user_id = current_actor().user_id
    story_service.get_story(user_id, story_id)
    return jsonify({"ok": True, "people": story_service.people_for_story(user_id, story_id)})


@story_api_bp.post("/<int:story_id>/people")
@jwt_required()
def tag_person(story_id: int):
    data = StoryPersonLink.model_validate(_body())
    link = story_service.tag_person(current_actor().user_id, story_id, data.person_id)
    return jsonify({"ok": True, "link": link}), 201


@story_api_bp.delete("/<int:story_id>/people/<int:person_id>")
@jwt_required()
def untag_person(story_id: int, person_id: int):
    story_service.untag_person(current_actor().user_id, story_id, person_id)
    return jsonify({"ok": True})
