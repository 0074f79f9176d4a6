"""Operator endpoints for the storage layer (X-Admin-Key protected)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from lifebook.core.errors import StorageError
from lifebook.core.storage import get_accessor
from lifebook.core.storage.migration import MigrationConflict, migrate_user
from lifebook.core.utils.decorators import require_admin_key

admin_bp = Blueprint("admin_api", __name__)


class MigrateRequest(BaseModel):
    user_id: int = Field(gt=0)


@admin_bp.get("/storage")
@require_admin_key
def storage_status():
    """Which stores are reachable and how often the primary has fallen back."""
    return jsonify({"ok": True, "storage": get_accessor().status()})


@admin_bp.post("/migrate")
@require_admin_key
def migrate():
    data = MigrateRequest.model_validate(request.get_json(silent=True) or {})
    accessor = get_accessor()
    if not accessor.primary.configured:
        return jsonify({"ok": False, "error": "primary_not_configured"}), 409
    try:
        report = migrate_user(accessor, data.user_id)
    except MigrationConflict as exc:
        body = {
            "ok": False,
            "error": "migration_conflict",
            "message": str(exc),
            "entity": exc.entity,
            "id": exc.record_id,
        }
        return jsonify(body), 409
    except LookupError as exc:
        return jsonify({"ok": False, "error": "not_found", "message": str(exc)}), 404
    except (SQLAlchemyError, OSError) as exc:
        raise StorageError("user data", "migrate", primary_error=exc) from exc
    return jsonify({"ok": True, "user_id": data.user_id, "migrated": report})
