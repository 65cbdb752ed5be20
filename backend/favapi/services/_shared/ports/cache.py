from __future__ import annotations

import fnmatch
import time
from typing import Any, Protocol


class CacheRepository(Protocol):
    """
    Key/value cache with per-key TTL and glob-pattern deletion.

    Implementations are **fail-soft**: backend or serialization failures
    surface as a miss (``None``), ``False`` or ``0``, never as an exception.
    The cache is an optimization, not a source of truth.

    ``ttl=None`` means the implementation's default TTL; ``ttl=0`` stores the
    key without expiry.
    """

    def get(self, key: str) -> Any | None: ...
    def set(self, key: str, value: Any, ttl: int | None = None) -> bool: ...
    def has(self, key: str) -> bool: ...
    def delete(self, key: str) -> bool: ...
    def delete_by_pattern(self, pattern: str) -> int: ...


class NullCache(CacheRepository):
    """Cache that stores nothing. Used when no cache backend is configured."""

    def get(self, key: str) -> Any | None:
        return None

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        return False

    def has(self, key: str) -> bool:
        return False

    def delete(self, key: str) -> bool:
        return False

    def delete_by_pattern(self, pattern: str) -> int:
        return 0


class InMemoryCache(CacheRepository):
    """Process-local cache for unit tests. Honors TTLs lazily on read."""

    def __init__(self, default_ttl: int = 3600) -> None:
        self.default_ttl = default_ttl
        self._data: dict[str, tuple[Any, float | None]] = {}

    def _live(self, key: str) -> tuple[Any, float | None] | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        _, expires = entry
        if expires is not None and expires <= time.monotonic():
            self._data.pop(key, None)
            return None
        return entry

    def get(self, key: str) -> Any | None:
        entry = self._live(key)
        return None if entry is None else entry[0]

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        ttl = self.default_ttl if ttl is None else ttl
        expires = time.monotonic() + ttl if ttl > 0 else None
        self._data[key] = (value, expires)
        return True

    def has(self, key: str) -> bool:
        return self._live(key) is not None

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def delete_by_pattern(self, pattern: str) -> int:
        matched = [k for k in self._data if fnmatch.fnmatchcase(k, pattern)]
        for key in matched:
            del self._data[key]
        return len(matched)

    def keys(self) -> list[str]:
        return [k for k in list(self._data) if self._live(k) is not None]
