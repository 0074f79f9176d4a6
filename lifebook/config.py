"""Application configuration for Lifebook."""

from __future__ import annotations

import os
from datetime import timedelta
from typing import Dict, Type

from dotenv import load_dotenv
from sqlalchemy.engine.url import make_url

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def _primary_uri() -> str:
    uri = (os.environ.get("DATABASE_URL") or "").strip()
    # Hosted Postgres providers still hand out the legacy scheme.
    if uri.startswith("postgres://"):
        uri = "postgresql://" + uri[len("postgres://") :]
    return uri


def engine_options_from_uri(uri: str) -> dict:
    if not uri:
        return {}
    url = make_url(uri)
    # Always keep pool_pre_ping, vary connect_args by dialect.
    if url.get_backend_name() == "sqlite":
        return {"pool_pre_ping": True, "connect_args": {"timeout": 30}}
    if url.get_backend_name() in {"postgresql", "postgres"}:
        timeout = int(os.environ.get("DB_CONNECT_TIMEOUT_SECONDS", "10"))
        return {"pool_pre_ping": True, "connect_args": {"connect_timeout": timeout}}
    return {"pool_pre_ping": True}


class BaseConfig:
    """Base configuration loaded for all environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")

    # Primary store. Empty means "not configured": every operation is served
    # by the embedded secondary store.
    SQLALCHEMY_DATABASE_URI = _primary_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = engine_options_from_uri(SQLALCHEMY_DATABASE_URI)
    PRIMARY_AUTO_PROVISION = _flag("PRIMARY_AUTO_PROVISION", "true")

    # Secondary (embedded) store.
    LIFEBOOK_DB_DIR = os.environ.get("LIFEBOOK_DB_DIR") or os.environ.get("DATABASE_DIR") or ""
    SECONDARY_DB_FILENAME = os.environ.get("SECONDARY_DB_FILENAME", "lifebook.db")
    SECONDARY_BUSY_TIMEOUT = float(os.environ.get("SECONDARY_BUSY_TIMEOUT", "30"))
    SECONDARY_SEED_SNAPSHOT = _flag("SECONDARY_SEED_SNAPSHOT", "true")

    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.environ.get("JWT_ACCESS_DAYS", "7")))

    RATELIMIT_DEFAULT = "300/hour"
    RATELIMIT_STORAGE_URI = os.environ.get("REDIS_URL", "memory://")
    RATELIMIT_ENABLED = _flag("RATELIMIT_ENABLED", "true")

    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", str(50 * 1024 * 1024)))
    UPLOAD_FOLDER = os.environ.get("UPLOAD_DIR", "instance/uploads")
    UPLOAD_ALLOWED_EXTENSIONS = set(
        (os.environ.get("UPLOAD_ALLOWED_EXTENSIONS") or "txt,csv,json,zip,gz,vcf,pdf,png,jpg,jpeg").split(",")
    )

    OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
    OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")
    OPENAI_CHAT_MODEL = os.environ.get("OPENAI_CHAT_MODEL") or OPENAI_MODEL
    OPENAI_TIMEOUT_SECONDS = float(os.environ.get("OPENAI_TIMEOUT_SECONDS", "30"))

    ADMIN_KEY = os.environ.get("ADMIN_KEY", "")
    HEALTH_INGEST_TOKEN = os.environ.get("HEALTH_INGEST_TOKEN", "")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"


class TestingConfig(BaseConfig):
    TESTING = True
    # Tests point both stores at temporary files explicitly.
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "")
    SQLALCHEMY_ENGINE_OPTIONS = engine_options_from_uri(SQLALCHEMY_DATABASE_URI)
    SECONDARY_SEED_SNAPSHOT = False
    RATELIMIT_ENABLED = False
    BCRYPT_LOG_ROUNDS = 4
    OPENAI_API_KEY = ""


class ProductionConfig(BaseConfig):
    ENV = "production"
    PRIMARY_AUTO_PROVISION = _flag("PRIMARY_AUTO_PROVISION", "false")


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    # CI pipelines set APP_ENV=ci; map to testing defaults.
    "ci": TestingConfig,
}
