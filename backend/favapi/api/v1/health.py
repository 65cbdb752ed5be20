"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from favapi.api.deps import container, json_response, timing
from favapi.core.extensions import db
from favapi.infra.redis.redis_cache import RedisCache

bp = Blueprint("health", __name__)


def _cache_status() -> str:
    cache = container().cache
    if not isinstance(cache, RedisCache):
        return "disabled"
    return "ok" if cache.ping() else "fail"


@bp.get("/health")
@timing
def healthcheck():
    """Return application, database and cache health information."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"
    finally:
        db.session.rollback()
    payload = {
        "status": "ok" if db_status == "ok" else "degraded",
        "db": db_status,
        "cache": _cache_status(),
        "version": current_app.config.get("APP_VERSION", "dev"),
    }
    return json_response(payload, status=200 if db_status == "ok" else 503)
