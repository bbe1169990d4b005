"""User profile endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from tokengate.api.deps import identity_service, require_auth, require_role, success, timing
from tokengate.schemas import (
    AccessUpdateSchema,
    PasswordChangeSchema,
    ProfileUpdateSchema,
    UserSchema,
)
from tokengate.services._shared.dto import Identity

bp = Blueprint("users", __name__, url_prefix="/users")

user_schema = UserSchema()
profile_update_schema = ProfileUpdateSchema()
password_change_schema = PasswordChangeSchema()
access_update_schema = AccessUpdateSchema()


def _json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


@bp.get("/profile")
@require_auth
@timing
def get_profile(identity: Identity):
    """Return the caller's profile."""

    user = identity_service(identity).get_profile(identity.id)
    return success("User profile retrieved successfully", user_schema.dump(user))


@bp.put("/profile")
@require_auth
@timing
def update_profile(identity: Identity):
    """Update the caller's names and/or email."""

    dto = profile_update_schema.load(_json_body())
    user = identity_service(identity).update_profile(identity.id, dto)
    return success("User profile updated successfully", user_schema.dump(user))


@bp.post("/change-password")
@require_auth
@timing
def change_password(identity: Identity):
    """Change the caller's password and revoke their refresh tokens."""

    dto = password_change_schema.load(_json_body())
    identity_service(identity).change_password(identity.id, dto)
    return success("Password changed successfully")


@bp.patch("/<user_id>/access")
@require_auth
@require_role("admin")
@timing
def update_access(user_id: str, identity: Identity):
    """Change another user's role or active flag (admin only)."""

    dto = access_update_schema.load(_json_body())
    user = identity_service(identity).update_access(user_id, dto)
    return success("User access updated successfully", user_schema.dump(user))
