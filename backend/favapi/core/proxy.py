"""Trust ``X-Forwarded-*`` headers from the reverse proxy in front of gunicorn."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Wrap the WSGI app in :class:`~werkzeug.middleware.proxy_fix.ProxyFix`.

    ``PROXYFIX_HOPS`` proxies are trusted for the client address, scheme and
    host, so access logs and the token issuer see what the caller used. No
    prefix is trusted: routes always live under ``API_BASE_PREFIX``.
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = max(int(app.config.get("PROXYFIX_HOPS", 1)), 0)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops)
