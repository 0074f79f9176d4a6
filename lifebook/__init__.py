"""Lifebook application factory and bootstrap."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify
from pydantic import ValidationError

from lifebook.config import config_by_name, engine_options_from_uri
from lifebook.core.errors import LifebookError, StorageError
from lifebook.core.utils.validation import jsonable_errors
from lifebook.extensions import init_extensions, jwt


def create_app(config_name: Optional[str] = None, config_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """Create and configure the Lifebook Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(__name__, instance_path=str(instance_root), instance_relative_config=True)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)
    if config_overrides:
        app.config.update(config_overrides)
        if "SQLALCHEMY_DATABASE_URI" in config_overrides and "SQLALCHEMY_ENGINE_OPTIONS" not in config_overrides:
            app.config["SQLALCHEMY_ENGINE_OPTIONS"] = engine_options_from_uri(
                config_overrides["SQLALCHEMY_DATABASE_URI"] or ""
            )

    # Uploads live under the instance folder unless an absolute path is given.
    uploads_path = Path(app.config.get("UPLOAD_FOLDER", "instance/uploads"))
    if not uploads_path.is_absolute():
        uploads_path = project_root / uploads_path
    uploads_path.mkdir(parents=True, exist_ok=True)
    app.config["UPLOAD_FOLDER"] = str(uploads_path)

    # Normalize a relative sqlite path to absolute to avoid "unable to open database file".
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///") and not db_uri.startswith("sqlite:////"):
        db_path = db_uri.replace("sqlite:///", "", 1)
        if db_path and db_path != ":memory:":
            abs_path = project_root / db_path
            abs_path.parent.mkdir(parents=True, exist_ok=True)
            app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{abs_path}"

    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_auth_handlers(app)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    @app.get("/api/v1/ping")
    def ping():
        """Lightweight endpoint for load-balancer health checks."""
        return {"pong": True}, 200

    return app


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from lifebook.core.admin.controllers import admin_bp
    from lifebook.core.auth.controllers import auth_bp  # local import to avoid circulars
    from lifebook.domains.chat.controllers.chat_api import chat_api_bp
    from lifebook.domains.coach.controllers.coach_api import coach_api_bp
    from lifebook.domains.ingest.controllers.ingest_api import ingest_api_bp
    from lifebook.domains.jokes.controllers.joke_api import joke_api_bp
    from lifebook.domains.journal.controllers.journal_api import journal_api_bp
    from lifebook.domains.people.controllers.people_api import people_api_bp
    from lifebook.domains.personal.controllers.collection_api import (
        beliefs_api_bp,
        goals_api_bp,
        protocols_api_bp,
        triggers_api_bp,
    )
    from lifebook.domains.personal.controllers.profile_api import (
        dating_api_bp,
        genome_api_bp,
        identity_api_bp,
    )
    from lifebook.domains.stories.controllers.practice_api import practice_api_bp
    from lifebook.domains.stories.controllers.story_api import story_api_bp
    from lifebook.domains.wellness.controllers.wellness_api import wellness_api_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(journal_api_bp, url_prefix="/api/journal")
    app.register_blueprint(story_api_bp, url_prefix="/api/stories")
    app.register_blueprint(practice_api_bp, url_prefix="/api/practice")
    app.register_blueprint(people_api_bp, url_prefix="/api/people")
    app.register_blueprint(joke_api_bp, url_prefix="/api/jokes")
    app.register_blueprint(wellness_api_bp, url_prefix="/api/wellness")
    app.register_blueprint(chat_api_bp, url_prefix="/api/chat")
    app.register_blueprint(coach_api_bp, url_prefix="/api/coach")
    app.register_blueprint(goals_api_bp, url_prefix="/api/goals")
    app.register_blueprint(beliefs_api_bp, url_prefix="/api/beliefs")
    app.register_blueprint(triggers_api_bp, url_prefix="/api/triggers")
    app.register_blueprint(protocols_api_bp, url_prefix="/api/protocols")
    app.register_blueprint(identity_api_bp, url_prefix="/api/identity")
    app.register_blueprint(dating_api_bp, url_prefix="/api/dating")
    app.register_blueprint(genome_api_bp, url_prefix="/api/genome")
    app.register_blueprint(ingest_api_bp, url_prefix="/api/ingest")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")


def _register_error_handlers(app: Flask) -> None:
    """JSON error responses."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(LifebookError)
    def _lifebook_error(exc: LifebookError):
        payload = exc.to_dict()
        if isinstance(exc, StorageError) and (app.debug or app.testing):
            payload.update(exc.diagnostics())
        return jsonify(payload), exc.status_code

    @app.errorhandler(ValidationError)
    def _validation_error(exc: ValidationError):
        errors = jsonable_errors(exc)
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "invalid input")
        return jsonify({"ok": False, "error": "validation_error", "message": message, "details": errors}), 400

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.name.lower().replace(" ", "_"), "message": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": "unexpected_error", "message": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500


def _register_auth_handlers(app: Flask) -> None:
    """Bearer-token failures answer in the same JSON shape as other errors."""

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return jsonify({"ok": False, "error": "unauthorized", "message": reason}), 401

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return jsonify({"ok": False, "error": "unauthorized", "message": reason}), 401

    @jwt.expired_token_loader
    def _expired_token(_header: dict, _payload: dict):
        return jsonify({"ok": False, "error": "token_expired", "message": "Token has expired"}), 401
