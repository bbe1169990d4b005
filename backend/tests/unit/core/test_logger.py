"""Unit tests for the JSON log formatter and request correlation."""

from __future__ import annotations

import json
import logging

from tokengate.core.logger import JSONFormatter, RequestIdFilter, ensure_request_id


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("tokengate.test", logging.WARNING, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formats_json_with_known_extras():
    record = _record(endpoint="auth.login", elapsed_ms=1.5, password="must-not-leak")
    payload = json.loads(JSONFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["name"] == "tokengate.test"
    assert payload["message"] == "hello"
    assert payload["endpoint"] == "auth.login"
    assert payload["elapsed_ms"] == 1.5
    assert "password" not in payload


def test_request_id_taken_from_header(app):
    with app.test_request_context(headers={"X-Request-ID": "req-123"}):
        record = _record()
        RequestIdFilter().filter(record)
        assert record.request_id == "req-123"
        assert ensure_request_id() == "req-123"


def test_request_id_absent_outside_requests():
    record = _record()
    RequestIdFilter().filter(record)
    assert record.request_id is None


def test_malformed_client_request_id_is_replaced(app):
    with app.test_request_context(headers={"X-Request-ID": "bad id <script>"}):
        request_id = ensure_request_id()
        assert request_id != "bad id <script>"
        assert len(request_id) == 36


def test_request_line_fields_are_logged(app):
    with app.test_request_context("/api/v1/auth/login", method="POST"):
        record = _record()
        RequestIdFilter().filter(record)
        payload = json.loads(JSONFormatter().format(record))
    assert payload["method"] == "POST"
    assert payload["path"] == "/api/v1/auth/login"
