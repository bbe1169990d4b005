"""HTTP tests for the profile and account-access endpoints."""

from __future__ import annotations

import pytest
from flask_jwt_extended import create_access_token

from tests.factories.refresh_token import RefreshTokenFactory
from tests.factories.user import AdminFactory, UserFactory
from tests.helpers.utils import bearer

API = "/api/v1"


def _auth(user) -> dict[str, str]:
    token = create_access_token(
        identity=user.id, additional_claims={"email": user.email, "role": user.role.value}
    )
    return bearer(token)


@pytest.fixture()
def user(session):
    return UserFactory(email="dana@example.com", password="OldPass123", first_name="Dana")


class TestProfile:
    def test_get_profile(self, client, user):
        resp = client.get(f"{API}/users/profile", headers=_auth(user))
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["message"] == "User profile retrieved successfully"
        assert body["data"]["first_name"] == "Dana"
        assert body["data"]["role"] == "user"
        assert "password_hash" not in body["data"]

    def test_update_profile(self, client, user):
        resp = client.put(
            f"{API}/users/profile", json={"last_name": "Scully"}, headers=_auth(user)
        )
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["message"] == "User profile updated successfully"
        assert body["data"]["first_name"] == "Dana"
        assert body["data"]["last_name"] == "Scully"

    def test_update_profile_requires_a_field(self, client, user):
        resp = client.put(f"{API}/users/profile", json={}, headers=_auth(user))
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Validation failed"

    def test_update_profile_rejects_unknown_fields(self, client, user):
        resp = client.put(f"{API}/users/profile", json={"role": "admin"}, headers=_auth(user))
        assert resp.status_code == 400
        assert "role" in resp.get_json()["errors"]

    def test_update_profile_email_in_use(self, client, user):
        UserFactory(email="taken@example.com")
        resp = client.put(
            f"{API}/users/profile", json={"email": "taken@example.com"}, headers=_auth(user)
        )
        assert resp.status_code == 409
        assert resp.get_json()["message"] == "Email is already in use"

    def test_requires_token(self, client):
        assert client.get(f"{API}/users/profile").status_code == 401
        assert client.put(f"{API}/users/profile", json={"first_name": "X"}).status_code == 401


class TestChangePassword:
    def test_change_password(self, client, user, session):
        token = RefreshTokenFactory(user=user)
        resp = client.post(
            f"{API}/users/change-password",
            json={
                "current_password": "OldPass123",
                "new_password": "NewPass456",
                "confirm_password": "NewPass456",
            },
            headers=_auth(user),
        )
        assert resp.status_code == 200
        assert resp.get_json()["message"] == "Password changed successfully"

        session.refresh(token)
        assert token.revoked is True
        login = client.post(
            f"{API}/auth/login", json={"email": user.email, "password": "NewPass456"}
        )
        assert login.status_code == 200

    def test_wrong_current_password(self, client, user):
        resp = client.post(
            f"{API}/users/change-password",
            json={
                "current_password": "Nope12345",
                "new_password": "NewPass456",
                "confirm_password": "NewPass456",
            },
            headers=_auth(user),
        )
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Current password is incorrect"

    def test_confirmation_mismatch(self, client, user):
        resp = client.post(
            f"{API}/users/change-password",
            json={
                "current_password": "OldPass123",
                "new_password": "NewPass456",
                "confirm_password": "NewPass789",
            },
            headers=_auth(user),
        )
        assert resp.status_code == 400
        assert "confirm_password" in resp.get_json()["errors"]

    def test_weak_new_password(self, client, user):
        resp = client.post(
            f"{API}/users/change-password",
            json={
                "current_password": "OldPass123",
                "new_password": "weak",
                "confirm_password": "weak",
            },
            headers=_auth(user),
        )
        assert resp.status_code == 400
        assert "new_password" in resp.get_json()["errors"]


class TestUpdateAccess:
    def test_admin_deactivates_user(self, client, user, session):
        admin = AdminFactory()
        user_headers = _auth(user)

        resp = client.patch(
            f"{API}/users/{user.id}/access", json={"is_active": False}, headers=_auth(admin)
        )
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["message"] == "User access updated successfully"
        assert body["data"]["is_active"] is False

        # The still-valid access token stops working on the next request
        assert client.get(f"{API}/users/profile", headers=user_headers).status_code == 401

    def test_admin_promotes_user(self, client, user):
        admin = AdminFactory()
        resp = client.patch(
            f"{API}/users/{user.id}/access", json={"role": "admin"}, headers=_auth(admin)
        )
        assert resp.status_code == 200
        assert resp.get_json()["data"]["role"] == "admin"

    def test_non_admin_forbidden(self, client, user):
        other = UserFactory()
        resp = client.patch(
            f"{API}/users/{other.id}/access", json={"role": "admin"}, headers=_auth(user)
        )
        assert resp.status_code == 403
        assert resp.get_json()["message"] == "Forbidden - Insufficient permissions"

    def test_unknown_user(self, client):
        admin = AdminFactory()
        resp = client.patch(
            f"{API}/users/00000000-0000-0000-0000-000000000000/access",
            json={"role": "admin"},
            headers=_auth(admin),
        )
        assert resp.status_code == 404
        assert resp.get_json()["message"] == "User not found"

    def test_invalid_role(self, client):
        admin = AdminFactory()
        resp = client.patch(
            f"{API}/users/{admin.id}/access", json={"role": "editor"}, headers=_auth(admin)
        )
        assert resp.status_code == 400
        assert "role" in resp.get_json()["errors"]
