"""Health exporter webhook intake."""

from __future__ import annotations

import logging

from lifebook.core import records
from lifebook.core.errors import NotFound, ValidationFailed
from lifebook.core.storage import execute
from lifebook.domains.ingest.schemas.ingest_schemas import HealthEventPayload

logger = logging.getLogger(__name__)

ENTITY = "health_intake_events"


def store_event(raw: dict, data: HealthEventPayload) -> dict:
    """Keep the full request body as the event payload."""
    if data.user_id is None:
        raise ValidationFailed("user_id", "user_id is required")
    if execute("users", "read", {"id": data.user_id}).unwrap() is None:
        raise NotFound("user")
    event = records.create_owned(
        ENTITY,
        data.user_id,
        {
            "source": data.source,
            "event_type": data.event_type,
            "event_date": data.event_date,
            "payload": raw,
        },
    )
    logger.info("Stored %s event %s for user %s", data.event_type, event["id"], data.user_id)
    return event
