"""CORS policy for the versioned API surface."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from tokengate.core.logger import REQUEST_ID_HEADER


def parse_origins(raw: str | None) -> list[str]:
    """Split a comma-separated ``CORS_ORIGINS`` value, dropping blanks."""
    return [o.strip() for o in (raw or "").split(",") if o.strip()]


def init_app(app: Flask) -> None:
    """Enable CORS on ``API_BASE_PREFIX`` routes.

    A blank or ``"*"`` origin list allows any origin without credentials;
    an explicit list enables credentials so the refresh-token cookie can be
    sent cross-origin. ``Authorization`` is accepted and ``X-Request-ID``
    exposed to browsers.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    wildcard = not origins or origins == ["*"]
    prefix = app.config.get("API_BASE_PREFIX", "/api").rstrip("/")

    CORS(
        app,
        resources={rf"{prefix}/*": {"origins": "*" if wildcard else origins}},
        supports_credentials=not wildcard,
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
