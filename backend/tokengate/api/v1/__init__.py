"""Version 1 of the HTTP API: health probe, auth session and user profile routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Route modules import ``tokengate.api.deps``; keep these below the constants.
from .auth import bp as auth_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402
from .users import bp as users_bp  # noqa: E402

# (blueprint, mount point below /<API_BASE_PREFIX>/v1)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),
    (auth_bp, "/auth"),
    (users_bp, "/users"),
]
