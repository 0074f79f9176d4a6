"""Token-authenticated ingestion webhooks (no JWT)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from lifebook.core.utils.decorators import require_ingest_token
from lifebook.domains.ingest.schemas.ingest_schemas import HealthEventPayload
from lifebook.domains.ingest.services import ingest_service

ingest_api_bp = Blueprint("ingest_api", __name__)


@ingest_api_bp.post("/apple-health")
@require_ingest_token
def apple_health():
    raw = request.get_json(silent=True) or {}
    data = HealthEventPayload.model_validate(raw)
    event = ingest_service.store_event(raw, data)
    return jsonify({"ok": True, "status": "stored", "event_id": event["id"]}), 201
