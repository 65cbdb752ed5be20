# tests/unit/infra/test_redis_cache.py
"""
Unit tests for RedisCache using fakeredis.

They cover JSON round-trips, TTL handling, pattern deletes and the fail-soft
contract: a broken Redis never raises out of the cache.
"""

from __future__ import annotations

import logging
from unittest import mock

import fakeredis
import pytest
from favapi.infra.redis.redis_cache import RedisCache
from redis.exceptions import ConnectionError as RedisConnectionError


@pytest.fixture
def fake_redis():
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def cache(fake_redis) -> RedisCache:
    return RedisCache(fake_redis, default_ttl=60)


def test_set_and_get_json_values(cache):
    assert cache.set("k", {"a": [1, 2], "b": None}) is True
    assert cache.get("k") == {"a": [1, 2], "b": None}
    assert cache.has("k") is True


def test_false_is_a_value_not_a_miss(cache):
    cache.set("absent", False)
    assert cache.get("absent") is False
    assert cache.get("never-set") is None


def test_default_and_explicit_ttl(cache, fake_redis):
    cache.set("default", 1)
    cache.set("explicit", 1, ttl=5)
    cache.set("forever", 1, ttl=0)
    assert 0 < fake_redis.ttl("default") <= 60
    assert 0 < fake_redis.ttl("explicit") <= 5
    assert fake_redis.ttl("forever") == -1


def test_delete_by_pattern_only_touches_matches(cache):
    for i in range(3):
        cache.set(f"favorites:exists:1:{i}", True)
    cache.set("favorites:exists:2:0", True)

    assert cache.delete_by_pattern("favorites:exists:1:*") == 3
    assert cache.has("favorites:exists:2:0") is True
    assert cache.delete("favorites:exists:2:0") is True
    assert cache.delete("favorites:exists:2:0") is False


def test_unserializable_value_is_reported_not_raised(cache):
    assert cache.set("bad", object()) is False
    assert cache.get("bad") is None


def test_corrupt_payload_reads_as_miss(cache, fake_redis):
    fake_redis.set("corrupt", b"{not json")
    assert cache.get("corrupt") is None


def test_backend_failures_are_fail_soft(cache, fake_redis, caplog):
    boom = RedisConnectionError("down")
    caplog.set_level(logging.WARNING, logger="favapi.infra.redis.redis_cache")
    with (
        mock.patch.object(fake_redis, "get", side_effect=boom),
        mock.patch.object(fake_redis, "set", side_effect=boom),
        mock.patch.object(fake_redis, "exists", side_effect=boom),
        mock.patch.object(fake_redis, "delete", side_effect=boom),
        mock.patch.object(fake_redis, "scan_iter", side_effect=boom),
        mock.patch.object(fake_redis, "ping", side_effect=boom),
    ):
        assert cache.get("k") is None
        assert cache.set("k", 1) is False
        assert cache.has("k") is False
        assert cache.delete("k") is False
        assert cache.delete_by_pattern("k*") == 0
        assert cache.ping() is False

    assert any("cache.get_failed" in r.getMessage() for r in caplog.records)
