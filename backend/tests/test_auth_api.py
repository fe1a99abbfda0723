"""
API tests for auth router: register, login, /auth/me.
"""
import pytest

from app.config import settings
from app.services.auth import decode_access_token
from conftest import ADDRESS, PASSWORD, USER_NAME, auth_header


def _register(client, **overrides):
    body = {"name": USER_NAME, "email": "new.user@example.com", "address": ADDRESS, "password": PASSWORD}
    body.update(overrides)
    return client.post("/api/auth/register", json=body)


def test_register_then_login_round_trips_token(client):
    r = _register(client)
    assert r.status_code == 201, r.text
    user_id = r.json()["userId"]
    assert r.json()["message"] == "User registered successfully"

    r = client.post("/api/auth/login", json={"email": "new.user@example.com", "password": PASSWORD})
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["user"] == {"id": user_id, "name": USER_NAME, "email": "new.user@example.com", "role": "user"}
    assert "password" not in str(data["user"]).lower()
    claims = decode_access_token(data["token"])
    assert claims.user_id == user_id
    assert claims.role == "user"


def test_register_store_owner_role(client):
    r = _register(client, role="store_owner")
    assert r.status_code == 201, r.text
    r = client.post("/api/auth/login", json={"email": "new.user@example.com", "password": PASSWORD})
    assert r.json()["user"]["role"] == "store_owner"


def test_register_admin_refused_by_default(client):
    r = _register(client, role="admin")
    assert r.status_code == 403
    assert "administrator" in r.json()["message"]


def test_register_admin_allowed_when_enabled(client, monkeypatch):
    monkeypatch.setattr(settings, "allow_admin_self_registration", True)
    r = _register(client, role="admin")
    assert r.status_code == 201, r.text


def test_register_unknown_role_is_400(client):
    r = _register(client, role="owner")
    assert r.status_code == 400
    assert "Invalid role" in r.json()["message"]


def test_register_duplicate_email_is_409(client):
    assert _register(client).status_code == 201
    r = _register(client, email="NEW.USER@example.com")
    assert r.status_code == 409
    assert r.json() == {"message": "Email already in use"}


@pytest.mark.parametrize(
    "overrides, fragment",
    [
        ({"name": "Too Short"}, "Name must be between 20 and 60"),
        ({"name": "x" * 61}, "Name must be between 20 and 60"),
        ({"address": "y" * 401}, "Address must be at most 400"),
        ({"email": "not-an-email"}, "not a valid email address"),
        ({"email": "owner@shop..example.com"}, "not a valid email address"),
        ({"password": "weakpass"}, "8-16 characters"),
    ],
)
def test_register_validation_errors_are_400(client, overrides, fragment):
    r = _register(client, **overrides)
    assert r.status_code == 400
    assert fragment in r.json()["message"]


def test_register_reports_all_violations(client):
    r = _register(client, name="short", password="weak")
    assert r.status_code == 400
    message = r.json()["message"]
    assert "Name must be between" in message
    assert "8-16 characters" in message


def test_register_missing_field_is_400(client):
    r = client.post("/api/auth/register", json={"name": USER_NAME, "email": "a@b.co", "password": PASSWORD})
    assert r.status_code == 400
    assert r.json()["message"] == "address is required"


def test_register_invalid_json_is_400(client):
    r = client.post("/api/auth/register", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert "message" in r.json()


def test_login_wrong_password_and_unknown_email_look_the_same(client, make_user):
    make_user(email="known@example.com")
    wrong = client.post("/api/auth/login", json={"email": "known@example.com", "password": "Secret#Pass2"})
    unknown = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"message": "Invalid email or password"}


def test_login_email_is_case_insensitive(client, make_user):
    make_user(email="mixed@example.com")
    r = client.post("/api/auth/login", json={"email": "MIXED@Example.com", "password": PASSWORD})
    assert r.status_code == 200, r.text


def test_login_blank_fields_are_400(client):
    r = client.post("/api/auth/login", json={"email": "", "password": ""})
    assert r.status_code == 400
    assert r.json()["message"] == "Email and password are required"


def test_me_returns_live_projection(client, make_user):
    user = make_user(role="store_owner")
    r = client.get("/api/auth/me", headers=auth_header(user))
    assert r.status_code == 200, r.text
    assert r.json() == {"id": user.id, "name": user.name, "email": user.email, "role": "store_owner"}


def test_health_needs_no_token(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_login_malformed_email_is_400(client, make_user):
    make_user(email="known@example.com")
    r = client.post("/api/auth/login", json={"email": "known@@example.com", "password": PASSWORD})
    assert r.status_code == 400
    assert "not a valid email address" in r.json()["message"]
