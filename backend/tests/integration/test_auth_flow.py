"""End-to-end authentication flow through the HTTP API."""

from __future__ import annotations

import pytest

from tests.factories.user import UserFactory
from tests.helpers.utils import bearer
from tokengate.models.user import User

API = "/api/v1"
ALICE = {"email": "alice@example.com", "password": "S3cretPass", "first_name": "Alice"}


def _register(client, payload=None):
    return client.post(f"{API}/auth/register", json=payload or ALICE)


def _login(client, email=ALICE["email"], password=ALICE["password"]):
    return client.post(f"{API}/auth/login", json={"email": email, "password": password})


def test_full_scenario(client):
    """register -> login -> refresh -> profile, old refresh token rejected."""
    resp = _register(client)
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["status"] == "success"
    assert body["message"] == "User registered successfully"
    assert body["data"]["user"]["email"] == "alice@example.com"
    assert body["data"]["token_type"] == "Bearer"
    assert body["data"]["access_token"] and body["data"]["refresh_token"]

    resp = _login(client)
    assert resp.status_code == 200
    login = resp.get_json()
    assert login["message"] == "Login successful"
    assert login["data"]["user"]["last_login"] is not None
    assert login["data"]["expires_in"] == 15 * 60

    old_refresh = login["data"]["refresh_token"]
    resp = client.post(f"{API}/auth/refresh-token", json={"refresh_token": old_refresh})
    assert resp.status_code == 200
    refreshed = resp.get_json()
    assert refreshed["message"] == "Token refreshed successfully"
    assert refreshed["data"]["refresh_token"] != old_refresh

    resp = client.post(f"{API}/auth/refresh-token", json={"refresh_token": old_refresh})
    assert resp.status_code == 401
    assert resp.get_json() == {"status": "error", "message": "Invalid or expired refresh token"}

    resp = client.get(f"{API}/users/profile", headers=bearer(refreshed["data"]["access_token"]))
    assert resp.status_code == 200
    profile = resp.get_json()["data"]
    assert profile["email"] == "alice@example.com"
    assert "password" not in profile and "password_hash" not in profile

    resp = client.get(f"{API}/users/profile")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Unauthorized - Invalid token"


def test_responses_carry_request_id(client):
    resp = client.get(f"{API}/health", headers={"X-Request-ID": "trace-1"})
    assert resp.headers["X-Request-ID"] == "trace-1"


class TestRegister:
    def test_duplicate_email(self, client, session):
        assert _register(client).status_code == 201
        resp = _register(client)
        assert resp.status_code == 409
        assert resp.get_json()["message"] == "User with this email already exists"
        assert session.query(User).filter_by(email=ALICE["email"]).count() == 1

    @pytest.mark.parametrize(
        ("payload", "field"),
        [
            ({"email": "not-an-email", "password": "S3cretPass"}, "email"),
            ({"email": "a@example.com", "password": "short1A"}, "password"),
            ({"email": "a@example.com", "password": "alllowercase1"}, "password"),
            ({"email": "a@example.com", "password": "ALLUPPERCASE1"}, "password"),
            ({"email": "a@example.com", "password": "NoDigitsHere"}, "password"),
            ({"email": "a@example.com", "password": "S3cretPass", "first_name": ""}, "first_name"),
            ({"email": "a@example.com", "password": "S3cretPass", "last_name": "x" * 51},
             "last_name"),
            ({"password": "S3cretPass"}, "email"),
        ],
    )
    def test_validation(self, client, payload, field):
        resp = _register(client, payload)
        assert resp.status_code == 400
        body = resp.get_json()
        assert body["status"] == "error"
        assert body["message"] == "Validation failed"
        assert field in body["errors"]

    def test_password_policy_reports_every_rule(self, client):
        resp = _register(client, {"email": "a@example.com", "password": "abc"})
        messages = resp.get_json()["errors"]["password"]
        assert len(messages) == 3


class TestLogin:
    def test_unknown_email_and_wrong_password_look_the_same(self, client):
        UserFactory(email="bob@example.com", password="S3cretPass")

        unknown = _login(client, "ghost@example.com", "S3cretPass")
        wrong = _login(client, "bob@example.com", "Wr0ngPass")

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.get_json() == wrong.get_json() == {
            "status": "error",
            "message": "Invalid email or password",
        }

    def test_inactive_account(self, client):
        UserFactory(email="sleepy@example.com", password="S3cretPass", is_active=False)
        resp = _login(client, "sleepy@example.com", "S3cretPass")
        assert resp.status_code == 403
        assert resp.get_json()["message"] == "Account is inactive"

    def test_empty_password_is_validation_error(self, client):
        resp = _login(client, "bob@example.com", "")
        assert resp.status_code == 400
        assert "password" in resp.get_json()["errors"]

    def test_non_json_body(self, client):
        resp = client.post(f"{API}/auth/login", data="nope", content_type="text/plain")
        assert resp.status_code == 400


class TestRefresh:
    def test_missing_token(self, client):
        resp = client.post(f"{API}/auth/refresh-token", json={})
        assert resp.status_code == 400
        assert "refresh_token" in resp.get_json()["errors"]

    def test_token_from_cookie(self, client):
        _register(client)
        token = _login(client).get_json()["data"]["refresh_token"]

        client.set_cookie("refresh_token", token)
        resp = client.post(f"{API}/auth/refresh-token")
        assert resp.status_code == 200

    def test_deactivated_owner(self, client, session):
        _register(client)
        token = _login(client).get_json()["data"]["refresh_token"]
        user = session.query(User).filter_by(email=ALICE["email"]).one()
        user.is_active = False
        session.commit()

        resp = client.post(f"{API}/auth/refresh-token", json={"refresh_token": token})
        assert resp.status_code == 403


class TestLogout:
    def test_logout_revokes_and_is_idempotent(self, client):
        _register(client)
        token = _login(client).get_json()["data"]["refresh_token"]

        for _ in range(2):
            resp = client.post(f"{API}/auth/logout", json={"refresh_token": token})
            assert resp.status_code == 200
            assert resp.get_json() == {"status": "success", "message": "Logout successful"}

        resp = client.post(f"{API}/auth/refresh-token", json={"refresh_token": token})
        assert resp.status_code == 401

    def test_logout_without_token(self, client):
        resp = client.post(f"{API}/auth/logout")
        assert resp.status_code == 200
        assert resp.get_json()["message"] == "Logout successful"
