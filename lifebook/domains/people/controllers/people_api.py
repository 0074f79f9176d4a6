"""People JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from lifebook.core.auth.actor import current_actor
from lifebook.domains.jokes.services import joke_service
from lifebook.domains.people.schemas.people_schemas import (
    ApplyInsightsRequest,
    InsideJokeCreate,
    JournalAnalysisRequest,
    PersonCreate,
    PersonListFilter,
    PersonUpdate,
    TopicCreate,
    TopicUpdate,
)
from lifebook.domains.people.services import people_service
from lifebook.domains.stories.services import story_service

people_api_bp = Blueprint("people_api", __name__)


def _body() -> dict:
    return request.get_json(silent=True) or {}


@people_api_bp.get("")
@jwt_required()
def list_people():
    filters = PersonListFilter.model_validate(request.args.to_dict())
    return jsonify({"ok": True, "people": people_service.list_people(current_actor().user_id, filters.q)})


@people_api_bp.post("/analyze-journal")
@jwt_required()
def analyze_journal():
    data = JournalAnalysisRequest.model_validate(_body())
    insights = people_service.analyze_journal(current_actor().user_id, data.content, data.journal_entry_id)
    return jsonify({"ok": True, "insights": insights})


@people_api_bp.get("/<int:person_id>")
@jwt_required()
def get_person(person_id: int):
    return jsonify({"ok": True, "person": people_service.person_detail(current_actor().user_id, person_id)})


@people_api_bp.post("")
@jwt_required()
def create_person():
    data = PersonCreate.model_validate(_body())
    return jsonify({"ok": True, "person": people_service.create_person(current_actor().user_id, data)}), 201


@people_api_bp.route("/<int:person_id>", methods=["PUT", "PATCH"])
@jwt_required()
def update_person(person_id: int):
    data = PersonUpdate.model_validate(_body())
    return jsonify({"ok": True, "person": people_service.update_person(current_actor().user_id, person_id, data)})


@people_api_bp.delete("/<int:person_id>")
@jwt_required()
def delete_person(person_id: int):
    people_service.delete_person(current_actor().user_id, person_id)
    return jsonify({"ok": True})


@people_api_bp.post("/<int:person_id>/apply-insights")
@jwt_required()
def apply_insights(person_id: int):
    data = ApplyInsightsRequest.model_validate(_body())
    person = people_service.apply_insights(current_actor().user_id, person_id, data.insights)
    return jsonify({"ok": True, "person": person})


# -- topics ------------------------------------------------------------------


@people_api_bp.get("/<int:person_id>/topics")
@jwt_required()
def list_topics(person_id: int):
    return jsonify({"ok": True, "topics": people_service.list_topics(current_actor().user_id, person_id)})


@people_api_bp.post("/<int:person_id>/topics")
@jwt_required()
def add_topic(person_id: int):
    data = TopicCreate.model_validate(_body())
    topic = people_service.add_topic(current_actor().user_id, person_id, data.topic)
    return jsonify({"ok": True, "topic": topic}), 201


@people_api_bp.patch("/<int:person_id>/topics/<int:topic_id>")
@jwt_required()
def update_topic(person_id: int, topic_id: int):
    data = TopicUpdate.model_validate(_body())
    topic = people_service.set_topic_used(current_actor().user_id, person_id, topic_id, data.is_used)
    return jsonify({"ok": True, "topic": topic})


@people_api_bp.delete("/<int:person_id>/topics/<int:topic_id>")
@jwt_required()
def delete_topic(person_id: int, topic_id: int):
    people_service.delete_topic(current_actor().user_id, person_id, topic_id)
    return jsonify({"ok": True})


# -- inside jokes ------------------------------------------------------------


@people_api_bp.get("/<int:person_id>/inside-jokes")
@jwt_required()
def list_inside_jokes(person_id: int):
    jokes = people_service.list_inside_jokes(current_actor().user_id, person_id)
    return jsonify({"ok": True, "inside_jokes": jokes})


@people_api_bp.post("/<int:person_id>/inside-jokes")
@jwt_required()
def add_inside_joke(person_id: int):
    data = InsideJokeCreate.model_validate(_body())
    joke = people_service.add_inside_joke(current_actor().user_id, person_id, data)
    return jsonify({"ok": True, "inside_joke": joke}), 201


@people_api_bp.delete("/<int:person_id>/inside-jokes/<int:joke_id>")
@jwt_required()
def delete_inside_joke(person_id: int, joke_id: int):
    people_service.delete_inside_joke(current_actor().user_id, person_id, joke_id)
    return jsonify({"ok": True})


# -- text uploads ------------------------------------------------------------


@people_api_bp.get("/<int:person_id>/uploads")
@jwt_required()
def list_uploads(person_id: int):
    return jsonify({"ok": True, "uploads": people_service.list_uploads(current_actor().user_id, person_id)})


@people_api_bp.post("/<int:person_id>/uploads")
@jwt_required()
def add_upload(person_id: int):
    upload = people_service.add_upload(current_actor().user_id, person_id, request.files.get("file"))
    return jsonify({"ok": True, "upload": upload}), 201


@people_api_bp.delete("/<int:person_id>/uploads/<int:upload_id>")
@jwt_required()
def delete_upload(person_id: int, upload_id: int):
    people_service.delete_upload(current_actor().user_id, person_id, upload_id)
    return jsonify({"ok": True})


# -- stories and jokes -------------------------------------------------------


@people_api_bp.get("/<int:person_id>/story-recommendations")
@jwt_required()
def story_recommendations(person_id: int):
    recommendations = people_service.story_recommendations(current_actor().user_id, person_id)
    return jsonify({"ok": True, "recommendations": recommendations})


@people_api_bp.post("/<int:person_id>/tag-story/<int:story_id>")
@jwt_required()
def tag_story(person_id: int, story_id: int):
    link = story_service.tag_person(current_actor().user_id, story_id, person_id)
    return jsonify({"ok": True, "link": link}), 201


@people_api_bp.delete("/<int:person_id>/tag-story/<int:story_id>")
@jwt_required()
def untag_story(person_id: int, story_id: int):
    story_service.untag_person(current_actor().user_id, story_id, person_id)
    return jsonify({"ok": True})


@people_api_bp.get("/<int:person_id>/jokes")
@jwt_required()
def person_jokes(person_id: int):
    return jsonify({"ok": True, "jokes": joke_service.jokes_for_person(current_actor().user_id, person_id)})
