"""HTTP tests for the health endpoint and generic error rendering."""

from __future__ import annotations

import fakeredis

from tokengate.core import extensions

API = "/api/v1"


def test_health_reports_components(client):
    resp = client.get(f"{API}/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "success"
    assert body["message"] == "API is running"
    assert body["data"]["version"] == "1.0.0"
    assert body["data"]["db"] == "ok"
    assert body["data"]["redis"] == "disabled"
    assert body["data"]["timestamp"]


def test_health_pings_redis_when_configured(client, monkeypatch):
    monkeypatch.setattr(extensions, "redis_client", fakeredis.FakeRedis())
    body = client.get(f"{API}/health").get_json()
    assert body["data"]["redis"] == "ok"


def test_unknown_route_uses_envelope(client):
    resp = client.get(f"{API}/nope")
    assert resp.status_code == 404
    assert resp.get_json() == {"status": "error", "message": "Route not found"}


def test_method_not_allowed_uses_envelope(client):
    resp = client.get(f"{API}/auth/login")
    assert resp.status_code == 405
    assert resp.get_json()["status"] == "error"
