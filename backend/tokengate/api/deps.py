"""Shared API helpers: response envelope, service wiring and authorization."""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request

from tokengate.core.errors import Forbidden, Unauthorized, envelope
from tokengate.core.logger import ensure_request_id
from tokengate.services._shared.base import ServiceContext
from tokengate.services._shared.dto import Identity
from tokengate.services._shared.ports import TokenProvider
from tokengate.services._shared.policies.roles import role_satisfies
from tokengate.services.auth.service import AuthService
from tokengate.services.identity.service import IdentityService

F = TypeVar("F", bound=Callable[..., Any])

log = logging.getLogger(__name__)

INVALID_TOKEN = "Unauthorized - Invalid token"
INSUFFICIENT_PERMISSIONS = "Forbidden - Insufficient permissions"

# Keys under ``app.extensions`` populated by the app factory
STORE_KEY = "tokengate.store"
HASHER_KEY = "tokengate.password_hasher"
TOKEN_PROVIDER_KEY = "tokengate.token_provider"
TOKEN_CONFIG_KEY = "tokengate.token_config"


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def success(message: str, data: Any = None, *, status: int = 200) -> Response:
    """Render a ``{"status": "success", ...}`` envelope."""

    return json_response(envelope(status="success", message=message, data=data), status=status)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Service wiring
# --------------------------------------------------------------------------- #


def _context(identity: Identity | None = None) -> ServiceContext:
    return ServiceContext(
        actor_id=identity.id if identity else None,
        request_id=ensure_request_id(),
    )


def auth_service() -> AuthService:
    """Build an :class:`AuthService` from the dependencies the factory registered."""

    ext = current_app.extensions
    return AuthService(
        store=ext[STORE_KEY],
        token_provider=ext[TOKEN_PROVIDER_KEY],
        password_hasher=ext[HASHER_KEY],
        token_cfg=ext[TOKEN_CONFIG_KEY],
        ctx=_context(),
    )


def identity_service(identity: Identity | None = None) -> IdentityService:
    """Build an :class:`IdentityService`, tagging the context with the actor."""

    ext = current_app.extensions
    return IdentityService(
        store=ext[STORE_KEY],
        password_hasher=ext[HASHER_KEY],
        ctx=_context(identity),
    )


# --------------------------------------------------------------------------- #
# Authorization
# --------------------------------------------------------------------------- #


def _bearer_token() -> str | None:
    """Return the token of an ``Authorization: Bearer <token>`` header, if any."""
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        return None
    return token


def authenticate_request() -> Identity:
    """
    Verify the bearer access token and resolve the caller's current identity.

    The user is re-read on every request, so deactivation and role changes
    apply immediately; a deleted or inactive user is rejected.

    :returns: Verified identity.
    :rtype: Identity
    :raises Unauthorized: Missing, malformed, tampered or expired token, or
        the subject no longer maps to an active user.
    """
    token = _bearer_token()
    if token is None:
        log.warning("auth.token.rejected reason=missing_bearer")
        raise Unauthorized(INVALID_TOKEN)

    provider: TokenProvider = current_app.extensions[TOKEN_PROVIDER_KEY]
    try:
        claims = provider.decode(token)
    except Exception as exc:
        log.warning("auth.token.rejected reason=%s", type(exc).__name__)
        raise Unauthorized(INVALID_TOKEN) from exc

    subject = claims.get("sub")
    if not subject or claims.get("type") != "access":
        log.warning("auth.token.rejected reason=bad_claims")
        raise Unauthorized(INVALID_TOKEN)

    identity = identity_service().resolve_identity(str(subject))
    if identity is None:
        log.warning("auth.token.rejected reason=unknown_or_inactive user_id=%s", subject)
        raise Unauthorized(INVALID_TOKEN)
    return identity


def require_auth(func: F) -> F:
    """Ensure a valid access token and pass the caller as ``identity=``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        kwargs["identity"] = authenticate_request()
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_role(required: str) -> Callable[[F], F]:
    """
    Ensure the identity injected by :func:`require_auth` holds ``required``.

    Must be applied below ``require_auth``. Grants come from
    :data:`tokengate.services._shared.policies.roles.ROLE_GRANTS`.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            identity: Identity | None = kwargs.get("identity")
            if identity is None:
                raise Unauthorized("Unauthorized")
            if not role_satisfies(identity.role, required):
                log.warning(
                    "auth.role.denied user_id=%s role=%s required=%s",
                    identity.id,
                    identity.role,
                    required,
                )
                raise Forbidden(INSUFFICIENT_PERMISSIONS)
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
