"""API v1 blueprint package bundling versioned routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .auth import bp as auth_bp  # noqa: E402
from .clients import bp as clients_bp  # noqa: E402
from .favorites import bp as favorites_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402
from .products import bp as products_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_version)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/v1/health
    (auth_bp, "/auth"),
    (clients_bp, "/clients"),
    (favorites_bp, "/clients"),  # -> /api/v1/clients/<id>/favorites
    (products_bp, "/products"),
]
