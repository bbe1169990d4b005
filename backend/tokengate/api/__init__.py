"""HTTP API package: mounts each versioned blueprint set under ``API_BASE_PREFIX``."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def join_prefix(*segments: str) -> str:
    """
    Join URL segments into a single absolute prefix.

    Empty segments are dropped, so ``join_prefix("/api/", "v1", "")`` is
    ``"/api/v1"``.
    """
    parts = [segment.strip("/") for segment in segments if segment and segment.strip("/")]
    return "/" + "/".join(parts)


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """
    Register blueprints beneath a shared version prefix.

    :param app: Application receiving the blueprints.
    :param base_prefix: Version root, e.g. ``"/api/v1"``.
    :param entries: ``(blueprint, relative_prefix)`` pairs; an empty relative
        prefix mounts the blueprint at the version root (the health probe).
    """
    for bp, rel_prefix in entries:
        app.register_blueprint(bp, url_prefix=join_prefix(base_prefix, rel_prefix))


def init_app(app: Flask) -> None:
    from tokengate.api.v1 import API_VERSION as V1
    from tokengate.api.v1 import REGISTRY as V1_REGISTRY

    api_base = app.config.get("API_BASE_PREFIX", "/api")
    register_blueprint_group(app, base_prefix=join_prefix(api_base, V1), entries=V1_REGISTRY)


__all__ = ["init_app", "join_prefix", "register_blueprint_group"]
