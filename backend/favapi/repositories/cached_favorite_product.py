"""Cache-aside wrapper around :class:`FavoriteProductRepository`.

Reads consult the cache first and fill it on a miss. Writes always go to the
database, then invalidate (never repopulate) the affected keys. Inside a unit
of work the invalidation runs after the commit, so a concurrent reader cannot
put pre-commit rows back into the cache. There is no locking; a stale read is
bounded by the TTL and by invalidation-on-write.

Key layout::

    favorites:client:{client_id}                         list snapshot
    favorites:client_product:{client_id}:{product_id}    entity snapshot or False
    favorites:exists:{client_id}:{product_id}            bool
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from favapi.models.favorite_product import FavoriteProduct
from favapi.repositories.favorite_product import FavoriteProductRepository
from favapi.services._shared.ports.cache import CacheRepository

log = logging.getLogger(__name__)

DEFAULT_TTL = 1800
EXISTS_TTL_CAP = 300

# Cached marker for "no such favorite"
NOT_FOUND_SENTINEL = False


def client_list_key(client_id: int) -> str:
    return f"favorites:client:{client_id}"


def client_product_key(client_id: int, product_id: int) -> str:
    return f"favorites:client_product:{client_id}:{product_id}"


def exists_key(client_id: int, product_id: int) -> str:
    return f"favorites:exists:{client_id}:{product_id}"


def invalidate_client_favorites(cache: CacheRepository, client_id: int) -> None:
    """Drop every cached favorite entry belonging to ``client_id``."""
    cache.delete(client_list_key(client_id))
    cache.delete_by_pattern(f"favorites:client_product:{client_id}:*")
    cache.delete_by_pattern(f"favorites:exists:{client_id}:*")


class CachedFavoriteProductRepository:
    """
    Favorites store with read-through caching and invalidation on write.

    :param inner: Durable repository (the only write path).
    :param cache: Fail-soft cache port.
    :param ttl: TTL in seconds for list and lookup entries.
    :param on_commit: Registers a callback to run once the surrounding
        transaction has committed. Without it, writes invalidate at once.
    """

    def __init__(
        self,
        inner: FavoriteProductRepository,
        cache: CacheRepository,
        *,
        ttl: int = DEFAULT_TTL,
        on_commit: Callable[[Callable[[], None]], None] | None = None,
    ) -> None:
        self.inner = inner
        self.cache = cache
        self.ttl = int(ttl)
        self.exists_ttl = min(self.ttl, EXISTS_TTL_CAP)
        self.on_commit = on_commit

    def _after_write(self, callback: Callable[[], None]) -> None:
        if self.on_commit is None:
            callback()
        else:
            self.on_commit(callback)

    # ------------------------------ Reads ---------------------------------

    def find_by_client_id(self, client_id: int) -> list[FavoriteProduct]:
        """Return the client's favorites, newest first.

        Empty results are not cached so the first add is visible at once.
        """
        key = client_list_key(client_id)
        cached = self.cache.get(key)
        if isinstance(cached, list):
            log.debug("favorites.cache_hit", extra={"cache_key": key})
            return [FavoriteProduct.restore(item) for item in cached]

        favorites = self.inner.find_by_client_id(client_id)
        if favorites:
            self.cache.set(key, [f.to_snapshot() for f in favorites], self.ttl)
        return favorites

    def find_by_client_and_product(
        self, client_id: int, product_id: int
    ) -> FavoriteProduct | None:
        """Look up one favorite. Both presence and absence are cached."""
        key = client_product_key(client_id, product_id)
        cached = self.cache.get(key)
        if cached is NOT_FOUND_SENTINEL:
            return None
        if isinstance(cached, dict):
            return FavoriteProduct.restore(cached)

        favorite = self.inner.find_by_client_and_product(client_id, product_id)
        payload: Any = favorite.to_snapshot() if favorite is not None else NOT_FOUND_SENTINEL
        self.cache.set(key, payload, self.ttl)
        return favorite

    def exists(self, client_id: int, product_id: int) -> bool:
        """Existence check with a short TTL, consulted on every add."""
        key = exists_key(client_id, product_id)
        cached = self.cache.get(key)
        if isinstance(cached, bool):
            return cached

        found = self.inner.exists_for(client_id, product_id)
        self.cache.set(key, found, self.exists_ttl)
        return found

    # ------------------------------ Writes --------------------------------

    def save(self, favorite: FavoriteProduct) -> FavoriteProduct:
        """Write through to the database, then invalidate the client's keys."""
        saved = self.inner.save(favorite)
        self.invalidate_client(saved.client_id)
        return saved

    def delete(self, client_id: int, product_id: int) -> bool:
        """Delete from the database, then invalidate including the exact lookup key."""
        removed = self.inner.remove(client_id, product_id)

        def invalidate() -> None:
            invalidate_client_favorites(self.cache, client_id)
            self.cache.delete(client_product_key(client_id, product_id))

        self._after_write(invalidate)
        return removed

    def invalidate_client(self, client_id: int) -> None:
        self._after_write(lambda: invalidate_client_favorites(self.cache, client_id))
