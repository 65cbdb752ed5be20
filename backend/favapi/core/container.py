"""Process-wide dependency container with explicit init and teardown.

Connection handles (Redis, the catalog HTTP session) are built here from the
app config and owned by the container; nothing opens a connection at import
time. The container is stored on ``app.extensions["favapi"]``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, cast

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from favapi.infra.http.product_catalog import HTTPProductCatalog
from favapi.infra.jwt.pyjwt_token_codec import PyJWTTokenCodec
from favapi.infra.redis.redis_cache import RedisCache
from favapi.services._shared.ports.cache import CacheRepository, NullCache
from favapi.services._shared.ports.product_catalog import ProductCatalog
from favapi.services._shared.ports.token_codec import TokenCodec
from favapi.services.auth.dto import AuthTokenConfig
from favapi.services.auth.service import AuthService
from favapi.services.clients.service import ClientService
from favapi.services.favorites.service import FavoriteService
from favapi.services.products.service import ProductService

log = logging.getLogger(__name__)

EXTENSION_KEY = "favapi"


@dataclass(slots=True)
class AppContainer:
    """Dependency registry shared across the Flask application lifecycle."""

    redis_client: redis.Redis | None
    cache: CacheRepository
    catalog: ProductCatalog
    token_codec: TokenCodec
    auth_service: AuthService
    client_service: ClientService
    favorite_service: FavoriteService
    product_service: ProductService

    def close(self) -> None:
        """Release network handles. Safe to call more than once."""
        close_catalog = getattr(self.catalog, "close", None)
        if callable(close_catalog):
            close_catalog()
        if self.redis_client is not None:
            try:
                self.redis_client.close()
            except RedisError as exc:
                log.warning("container.redis_close_failed: %s", exc)
            self.redis_client = None


def _connect_redis(config: dict[str, Any]) -> redis.Redis | None:
    url = config.get("REDIS_URL")
    if not url:
        return None
    timeout = float(config.get("REDIS_SOCKET_TIMEOUT", 2.0))
    return redis.Redis.from_url(url, socket_timeout=timeout, socket_connect_timeout=timeout)


def build_container(
    config: dict[str, Any],
    *,
    redis_client: redis.Redis | None = None,
    catalog: ProductCatalog | None = None,
    token_codec: TokenCodec | None = None,
) -> AppContainer:
    """
    Wire adapters and services from a Flask config mapping.

    Explicit arguments override what the config would build, which is how
    tests inject fakeredis or an in-memory catalog.
    """
    client = redis_client if redis_client is not None else _connect_redis(config)
    cache: CacheRepository
    if client is None:
        cache = NullCache()
    else:
        cache = RedisCache(client, default_ttl=int(config.get("CACHE_DEFAULT_TTL", 3600)))
        if not cache.ping():
            # Cache is fail-soft; the API keeps serving straight from the database
            log.warning("container.redis_unreachable")

    catalog = catalog or HTTPProductCatalog(
        str(config["PRODUCT_API_URL"]),
        connect_timeout=float(config.get("PRODUCT_API_CONNECT_TIMEOUT", 5.0)),
        read_timeout=float(config.get("PRODUCT_API_TIMEOUT", 10.0)),
    )
    base_url = str(config.get("API_BASE_URL", "http://localhost:8080"))
    codec = token_codec or PyJWTTokenCodec(
        issuer=base_url,
        audience=base_url,
        algorithm=str(config.get("JWT_ALGORITHM", "HS256")),
    )
    token_cfg = AuthTokenConfig(
        secret=str(config["JWT_SECRET"]),
        issuer=base_url,
        audience=base_url,
        access_expires=config["JWT_ACCESS_TOKEN_EXPIRES"],
    )
    favorites_ttl = int(config.get("FAVORITES_CACHE_TTL", 1800))
    shared = {"cache": cache, "favorites_ttl": favorites_ttl}

    return AppContainer(
        redis_client=client,
        cache=cache,
        catalog=catalog,
        token_codec=codec,
        auth_service=AuthService(token_codec=codec, token_cfg=token_cfg, **shared),
        client_service=ClientService(**shared),
        favorite_service=FavoriteService(catalog=catalog, **shared),
        product_service=ProductService(catalog=catalog),
    )


def init_app(app: Flask, **overrides: Any) -> AppContainer:
    """Build the container for ``app`` and register it under ``app.extensions``."""
    container = build_container(app.config, **overrides)
    app.extensions[EXTENSION_KEY] = container
    return container


def get_container(app: Flask | None = None) -> AppContainer:
    """Return the container of ``app`` (defaults to ``current_app``)."""
    target = app or current_app
    container = target.extensions.get(EXTENSION_KEY)
    if container is None:
        raise RuntimeError("Container is not initialized. Call init_app() first.")
    return cast(AppContainer, container)


def shutdown(app: Flask) -> None:
    """Close and unregister the container of ``app``."""
    container = app.extensions.pop(EXTENSION_KEY, None)
    if container is not None:
        container.close()
