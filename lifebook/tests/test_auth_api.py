"""Auth API: register, login (email or display name), token-protected profile."""

import pytest

from lifebook.core.storage import execute

pytestmark = pytest.mark.integration


def _register(client, email="new@example.com", password="secret123", name="New Person"):
    return client.post("/api/auth/register", json={"email": email, "password": password, "name": name})


def test_register_returns_token_and_user(client):
    resp = _register(client, email="New@Example.com")
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["ok"] is True
    assert body["token"]
    assert body["user"]["email"] == "new@example.com"
    assert "password_hash" not in body["user"]


def test_register_duplicate_email(client):
    _register(client)
    resp = _register(client)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_register_validates_input(client):
    resp = _register(client, email="not-an-email")
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "validation_error"
    assert body["details"]

    assert _register(client, password="123").status_code == 400


def test_login_with_email_and_name(client):
    _register(client)
    by_email = client.post("/api/auth/login", json={"email": "NEW@example.com", "password": "secret123"})
    by_name = client.post("/api/auth/login", json={"username": "New Person", "password": "secret123"})
    assert by_email.status_code == 200
    assert by_name.status_code == 200
    assert by_email.get_json()["user"]["id"] == by_name.get_json()["user"]["id"]


def test_login_rejects_bad_password(client):
    _register(client)
    resp = client.post("/api/auth/login", json={"email": "new@example.com", "password": "wrong"})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "invalid_credentials"


def test_login_requires_identifier(client):
    resp = client.post("/api/auth/login", json={"password": "secret123"})
    assert resp.status_code == 400


def test_me_uses_bearer_token(client):
    token = _register(client).get_json()["token"]
    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["name"] == "New Person"


def test_protected_routes_need_token(client):
    resp = client.get("/api/journal")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "unauthorized"

    resp = client.get("/api/journal", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_health_endpoints(client):
    assert client.get("/health").get_json() == {"ok": True}
    assert client.get("/api/v1/ping").get_json() == {"pong": True}


def test_register_refused_while_primary_unreachable(broken_primary_app):
    resp = _register(broken_primary_app.test_client())
    assert resp.status_code == 503
    body = resp.get_json()
    assert body["error"] == "storage_error"
    assert "primary store is reachable" in body["hint"]

    with broken_primary_app.app_context():
        assert execute("users", "read", {"email": "new@example.com"}, scoped=False).unwrap() is None
