"""Authentication endpoints using the service layer."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, current_app, request

from tokengate.api.deps import auth_service, identity_service, success, timing
from tokengate.core.extensions import limiter
from tokengate.schemas import (
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
    UserSchema,
)
from tokengate.services.auth.dto import LogoutIn

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
user_schema = UserSchema()
token_schema = TokenPairSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "10 per minute"))


def _json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _presented_refresh_token() -> Any:
    """Body ``refresh_token`` first, then the refresh-token cookie."""
    token = _json_body().get("refresh_token")
    if token:
        return token
    cookie_name = current_app.config.get("REFRESH_TOKEN_COOKIE_NAME", "refresh_token")
    return request.cookies.get(cookie_name)


def _auth_payload(user, tokens) -> dict[str, Any]:
    return {"user": user_schema.dump(user), **token_schema.dump(tokens)}


@bp.post("/register")
@timing
def register():
    """Register a new user and return it with a fresh token pair."""

    dto = register_schema.load(_json_body())
    auth = auth_service()
    result = identity_service().register(dto, issue_tokens=auth.issue_for)
    return success(
        "User registered successfully", _auth_payload(result.user, result.tokens), status=201
    )


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue an access/refresh token pair."""

    dto = login_schema.load(_json_body())
    result = auth_service().login(dto)
    return success("Login successful", _auth_payload(result.user, result.tokens))


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the presented refresh token."""

    token = _presented_refresh_token()
    dto = refresh_schema.load({} if token is None else {"refresh_token": token})
    tokens = auth_service().refresh(dto)
    return success("Token refreshed successfully", token_schema.dump(tokens))


@bp.post("/logout")
@timing
def logout():
    """Revoke the presented refresh token; always succeeds."""

    token = _presented_refresh_token()
    auth_service().logout(LogoutIn(refresh_token=token if isinstance(token, str) else None))
    return success("Logout successful")
