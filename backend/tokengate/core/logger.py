"""Structured JSON logging with per-request correlation ids.

Every record carries ``request_id``; records emitted inside a request also
carry ``method`` and ``path``. Credentials are never logged: only the keys in
:data:`EXTRA_KEYS` are copied from ``extra=``.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = ("X-Request-ID", "X-Correlation-ID")

# Client-supplied ids are echoed back and logged verbatim
SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

EXTRA_KEYS = ("endpoint", "elapsed_ms", "status", "user_id", "event")


class JSONFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        for key in ("method", "path"):
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key in EXTRA_KEYS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` (and request line fields) onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            record.request_id = ensure_request_id()
            record.method = request.method
            record.path = request.path
        else:
            record.request_id = None
        return True


def ensure_request_id() -> str:
    """
    Return the current request id, adopting a well-formed client header or
    generating a UUID4. Outside a request a throwaway id is returned.
    """
    if not has_request_context():
        return str(uuid4())
    current = g.get("request_id")
    if current:
        return current
    for header in CORRELATION_HEADERS:
        value = request.headers.get(header, "")
        if SAFE_REQUEST_ID.match(value):
            g.request_id = value
            return value
    g.request_id = str(uuid4())
    return g.request_id


def configure_logging(level: str | int = "INFO") -> None:
    """Route the root logger to stdout through :class:`JSONFormatter`."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    root.setLevel(level)


def init_app(app: Flask) -> None:
    """Seed the request id per request and echo it in ``X-Request-ID``."""
    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _seed_request_id() -> None:  # pragma: no cover - integration glue
        ensure_request_id()

    @app.after_request
    def _inject_response_header(response):  # pragma: no cover - integration glue
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response

    @app.teardown_request
    def _forget_request_id(exc):  # pragma: no cover - integration glue
        # ``g`` outlives the request when an app context is reused
        g.pop("request_id", None)


__all__ = ["configure_logging", "init_app", "ensure_request_id", "JSONFormatter"]
