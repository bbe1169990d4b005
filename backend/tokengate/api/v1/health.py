"""Health check endpoint."""

from __future__ import annotations

from datetime import UTC, datetime

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from tokengate.api.deps import success, timing
from tokengate.core import extensions
from tokengate.core.extensions import db

bp = Blueprint("health", __name__)


def _redis_status() -> str:
    client = extensions.get_redis()
    if client is None:
        return "disabled"
    try:
        client.ping()
    except RedisError:
        current_app.logger.exception("healthcheck.redis_error")
        return "fail"
    return "ok"


@bp.get("/health")
@timing
def healthcheck():
    """Return application, database and Redis health information."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"
    payload = {
        "version": current_app.config.get("APP_VERSION", "dev"),
        "timestamp": datetime.now(UTC).isoformat(),
        "db": db_status,
        "redis": _redis_status(),
    }
    return success("API is running", payload)
