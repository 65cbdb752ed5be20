import json
import logging
from typing import Any

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

log = logging.getLogger(__name__)

SCAN_BATCH_SIZE = 500


class RedisCache:
    """
    Fail-soft JSON cache backed by Redis.

    Values are stored as JSON text. Any Redis or (de)serialization failure is
    logged at WARNING and reported as a miss, ``False`` or ``0``.
    """

    def __init__(self, r: redis.Redis, *, default_ttl: int = 3600):
        self.r = r
        self.default_ttl = default_ttl

    def get(self, key: str) -> Any | None:
        try:
            raw = self.r.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except (RedisError, TypeError, ValueError) as exc:
            log.warning("cache.get_failed: %s", exc, extra={"cache_key": key})
            return None

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        ttl = self.default_ttl if ttl is None else int(ttl)
        try:
            payload = json.dumps(value)
            if ttl > 0:
                return bool(self.r.set(key, payload, ex=ttl))
            return bool(self.r.set(key, payload))
        except (RedisError, TypeError, ValueError) as exc:
            log.warning("cache.set_failed: %s", exc, extra={"cache_key": key})
            return False

    def has(self, key: str) -> bool:
        try:
            return int(self.r.exists(key)) > 0
        except RedisError as exc:
            log.warning("cache.exists_failed: %s", exc, extra={"cache_key": key})
            return False

    def delete(self, key: str) -> bool:
        try:
            return int(self.r.delete(key)) > 0
        except RedisError as exc:
            log.warning("cache.delete_failed: %s", exc, extra={"cache_key": key})
            return False

    def delete_by_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob ``pattern`` using ``SCAN``."""
        deleted = 0
        try:
            batch: list[Any] = []
            for key in self.r.scan_iter(match=pattern, count=SCAN_BATCH_SIZE):
                batch.append(key)
                if len(batch) >= SCAN_BATCH_SIZE:
                    deleted += int(self.r.delete(*batch))
                    batch.clear()
            if batch:
                deleted += int(self.r.delete(*batch))
        except RedisError as exc:
            log.warning("cache.delete_pattern_failed: %s", exc, extra={"cache_key": pattern})
        return deleted

    def ping(self) -> bool:
        try:
            return bool(self.r.ping())
        except RedisError:
            return False
