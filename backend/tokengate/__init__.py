"""Expose the application factory at package level.

``from tokengate import create_app`` is the entry point used by gunicorn
(``tokengate:create_app()``) and by ``flask --app tokengate``.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
