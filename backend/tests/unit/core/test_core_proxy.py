# tests/unit/core/test_core_proxy.py
from __future__ import annotations

from favapi.core import proxy
from flask import Flask, request
from werkzeug.middleware.proxy_fix import ProxyFix


def _app(**config) -> Flask:
    app = Flask(__name__)
    app.config.update(config)

    @app.get("/whoami")
    def whoami():
        return {"addr": request.remote_addr, "scheme": request.scheme}

    proxy.init_app(app)
    return app


def test_forwarded_headers_are_trusted_for_configured_hops():
    app = _app(USE_PROXYFIX=True, PROXYFIX_HOPS=1)

    response = app.test_client().get(
        "/whoami",
        headers={"X-Forwarded-For": "203.0.113.7", "X-Forwarded-Proto": "https"},
    )

    assert response.get_json() == {"addr": "203.0.113.7", "scheme": "https"}
    assert app.wsgi_app.x_prefix == 0


def test_disabled_proxyfix_leaves_wsgi_app_alone():
    app = _app(USE_PROXYFIX=False)

    response = app.test_client().get("/whoami", headers={"X-Forwarded-For": "203.0.113.7"})

    assert not isinstance(app.wsgi_app, ProxyFix)
    assert response.get_json()["addr"] == "127.0.0.1"
