"""CORS policy for the versioned API routes."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

# Headers a browser client sends and reads on every call
REQUEST_HEADERS = ["Content-Type", "Authorization", "X-Request-ID"]
EXPOSED_HEADERS = ["X-Request-ID"]


def parse_origins(raw: str | None) -> list[str] | None:
    """Split ``CORS_ORIGINS``. ``None`` means any origin."""
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    if not origins or origins == ["*"]:
        return None
    return origins


def init_app(app: Flask) -> None:
    """Allow browser clients to call everything under ``API_BASE_PREFIX``.

    With explicit origins, credentials are allowed. The wildcard policy
    never sends them; bearer tokens travel in ``Authorization`` anyway.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    prefix = str(app.config.get("API_BASE_PREFIX", "/api")).rstrip("/")

    CORS(
        app,
        resources={rf"{prefix}/*": {"origins": origins or "*"}},
        allow_headers=REQUEST_HEADERS,
        expose_headers=EXPOSED_HEADERS,
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        supports_credentials=origins is not None,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
