"""Trust ``X-Forwarded-*`` headers from the reverse proxy in front of gunicorn."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Wrap the WSGI app in :class:`~werkzeug.middleware.proxy_fix.ProxyFix`.

    The client address it recovers is the rate-limit key for ``/auth/login``,
    so the number of trusted hops (``PROXYFIX_HOPS``, default 1) must match
    the deployment. ``USE_PROXYFIX = False`` disables the wrapper.
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXYFIX_HOPS", 1))
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops)
