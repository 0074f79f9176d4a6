"""Shared extensions for the Lifebook application."""

import logging
from pathlib import Path

import sqlalchemy as sa
from flask_bcrypt import Bcrypt
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

logger = logging.getLogger(__name__)

# Core persistence and auth/security primitives
db = SQLAlchemy(session_options={"expire_on_commit": False})
migrate = Migrate()
jwt = JWTManager()
bcrypt = Bcrypt()
limiter = Limiter(
    key_func=get_remote_address, enabled=True, default_limits=["300 per hour"]
)


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_extensions(app) -> None:
    """Initialize all extensions with the Flask app."""
    if app.config.get("SQLALCHEMY_DATABASE_URI"):
        db.init_app(app)
        migrations_dir = Path(__file__).resolve().parent / "migrations"
        migrate.init_app(app, db, directory=str(migrations_dir))
        if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:"):
            with app.app_context():
                sa.event.listen(db.engine, "connect", _enable_sqlite_foreign_keys)
    else:
        # Flask-SQLAlchemy refuses an empty URI; leave the primary store unbound.
        app.config.pop("SQLALCHEMY_DATABASE_URI", None)
        logger.info("DATABASE_URL not set; primary store disabled, using embedded store only")
    jwt.init_app(app)
    bcrypt.init_app(app)
    limiter.enabled = app.config.get("RATELIMIT_ENABLED", True)
    limiter.default_limits = [app.config.get("RATELIMIT_DEFAULT", "300 per hour")]
    limiter.storage_uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
    limiter.init_app(app)

    from lifebook.core.llm import init_llm
    from lifebook.core.storage import init_storage

    init_storage(app)
    init_llm(app)
