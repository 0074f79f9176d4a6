from __future__ import annotations

from pathlib import Path

import pytest
from flask_jwt_extended import create_access_token

from lifebook import create_app
from lifebook.core.auth.auth_service import register_user
from lifebook.core.auth.schemas import RegisterRequest
from lifebook.core.storage import EXTENSION_KEY as STORAGE_KEY
from lifebook.core.llm import EXTENSION_KEY as LLM_KEY
from lifebook.extensions import db

ADMIN_KEY = "admin-test-key"
INGEST_TOKEN = "ingest-test-token"


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")
    config.addinivalue_line("markers", "slow: Slow running tests")


def build_app(tmp_path: Path, primary_uri: str, **overrides):
    """Testing app with both stores pointed at files under ``tmp_path``."""
    config = {
        "SQLALCHEMY_DATABASE_URI": primary_uri,
        "LIFEBOOK_DB_DIR": str(tmp_path / "embedded"),
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "ADMIN_KEY": ADMIN_KEY,
        "HEALTH_INGEST_TOKEN": INGEST_TOKEN,
        "OPENAI_API_KEY": "",
    }
    config.update(overrides)
    return create_app("testing", config)


def _teardown(app) -> None:
    with app.app_context():
        app.extensions[STORAGE_KEY].secondary.dispose()
        if "sqlalchemy" in app.extensions:
            db.session.remove()
            db.engine.dispose()


@pytest.fixture()
def app(tmp_path):
    """Primary store on a temp SQLite file, embedded store beside it."""
    app = build_app(tmp_path, f"sqlite:///{tmp_path / 'primary.db'}")
    yield app
    _teardown(app)


@pytest.fixture()
def embedded_app(tmp_path):
    """No primary configured: every operation is served by the embedded store."""
    app = build_app(tmp_path, "")
    yield app
    _teardown(app)


@pytest.fixture()
def broken_primary_app(tmp_path):
    """Primary configured but unreachable: its directory does not exist."""
    app = build_app(tmp_path, f"sqlite:///{tmp_path / 'missing' / 'primary.db'}")
    yield app
    _teardown(app)


@pytest.fixture(params=["primary", "embedded"])
def any_store_app(request, tmp_path):
    """Run a test once against each store."""
    uri = f"sqlite:///{tmp_path / 'primary.db'}" if request.param == "primary" else ""
    app = build_app(tmp_path, uri)
    yield app
    _teardown(app)


@pytest.fixture()
def client(app):
    return app.test_client()


def make_user(app, email: str = "tester@example.com", name: str = "Tester", password: str = "secret123") -> dict:
    with app.app_context():
        return register_user(RegisterRequest(email=email, password=password, name=name))


def headers_for(app, user: dict) -> dict[str, str]:
    with app.app_context():
        token = create_access_token(identity=str(user["id"]), additional_claims={"email": user["email"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def user(app):
    return make_user(app)


@pytest.fixture()
def auth_headers(app, user):
    return headers_for(app, user)


@pytest.fixture()
def other_headers(app):
    other = make_user(app, email="other@example.com", name="Other")
    return headers_for(app, other)


@pytest.fixture()
def llm(app):
    """The app's LLM client, for ``patch.object`` in tests."""
    return app.extensions[LLM_KEY]


@pytest.fixture()
def user_factory():
    return make_user


@pytest.fixture()
def token_headers():
    return headers_for


@pytest.fixture()
def app_factory(tmp_path):
    """Build extra apps sharing ``tmp_path``; each is torn down after the test."""
    built = []

    def factory(primary_uri: str, **overrides):
        app = build_app(tmp_path, primary_uri, **overrides)
        built.append(app)
        return app

    yield factory
    for app in built:
        _teardown(app)
