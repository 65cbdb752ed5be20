# tests/unit/repositories/test_repository_cached_favorites.py
"""Cache-aside behavior of the favorites repository over FakeRedis."""

from __future__ import annotations

from unittest import mock

import pytest
from favapi.infra.redis.redis_cache import RedisCache
from favapi.models.favorite_product import FavoriteProduct
from favapi.repositories.cached_favorite_product import (
    CachedFavoriteProductRepository,
    client_list_key,
    client_product_key,
    exists_key,
)
from favapi.repositories.favorite_product import FavoriteProductRepository
from favapi.services._shared.errors import ConflictError
from favapi.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

from tests.factories.client import ClientFactory
from tests.factories.favorite_product import FavoriteProductFactory


@pytest.fixture
def cache(fake_redis) -> RedisCache:
    return RedisCache(fake_redis)


@pytest.fixture
def inner(session) -> FavoriteProductRepository:
    return FavoriteProductRepository(session=session)


@pytest.fixture
def repo(inner, cache) -> CachedFavoriteProductRepository:
    return CachedFavoriteProductRepository(inner, cache, ttl=1800)


def _new_favorite(client_id: int, product_id: int) -> FavoriteProduct:
    return FavoriteProduct(
        client_id=client_id,
        product_id=product_id,
        product_title=f"Product {product_id}",
        product_price=5.0,
        product_rating=4.0,
    )


def test_list_is_served_from_cache_on_second_read(repo, inner, fake_redis):
    favorite = FavoriteProductFactory()
    client_id = favorite.client_id

    with mock.patch.object(inner, "find_by_client_id", wraps=inner.find_by_client_id) as spy:
        first = repo.find_by_client_id(client_id)
        second = repo.find_by_client_id(client_id)

    assert spy.call_count == 1
    assert [f.product_id for f in first] == [f.product_id for f in second]
    assert second[0].product_title == favorite.product_title
    assert 0 < fake_redis.ttl(client_list_key(client_id)) <= 1800


def test_empty_list_is_not_cached(repo, inner, fake_redis):
    client = ClientFactory()

    with mock.patch.object(inner, "find_by_client_id", wraps=inner.find_by_client_id) as spy:
        assert repo.find_by_client_id(client.id) == []
        assert repo.find_by_client_id(client.id) == []

    assert spy.call_count == 2
    assert fake_redis.exists(client_list_key(client.id)) == 0


def test_absent_lookup_is_cached_with_sentinel(repo, inner, cache):
    client = ClientFactory()
    spy_target = inner.find_by_client_and_product

    with mock.patch.object(inner, "find_by_client_and_product", wraps=spy_target) as spy:
        assert repo.find_by_client_and_product(client.id, 99) is None
        assert repo.find_by_client_and_product(client.id, 99) is None

    assert spy.call_count == 1
    assert cache.get(client_product_key(client.id, 99)) is False


def test_present_lookup_round_trips_through_cache(repo, inner):
    favorite = FavoriteProductFactory(product_id=8)
    spy_target = inner.find_by_client_and_product

    with mock.patch.object(inner, "find_by_client_and_product", wraps=spy_target) as spy:
        repo.find_by_client_and_product(favorite.client_id, 8)
        cached = repo.find_by_client_and_product(favorite.client_id, 8)

    assert spy.call_count == 1
    assert cached.id == favorite.id
    assert cached.product_id == 8


def test_exists_uses_short_ttl(repo, fake_redis):
    client = ClientFactory()
    assert repo.exists(client.id, 3) is False
    ttl = fake_redis.ttl(exists_key(client.id, 3))
    assert 0 < ttl <= 300


def test_save_invalidates_every_key_of_the_client(repo, cache, session):
    existing = FavoriteProductFactory(product_id=1)
    client_id = existing.client_id
    repo.find_by_client_id(client_id)
    repo.exists(client_id, 2)
    repo.find_by_client_and_product(client_id, 2)

    repo.save(_new_favorite(client_id, 2))
    session.commit()

    assert cache.get(client_list_key(client_id)) is None
    assert cache.get(exists_key(client_id, 2)) is None
    assert cache.get(client_product_key(client_id, 2)) is None
    assert {f.product_id for f in repo.find_by_client_id(client_id)} == {1, 2}
    assert repo.exists(client_id, 2) is True


def test_save_duplicate_raises_conflict(repo, session):
    existing = FavoriteProductFactory(product_id=4)
    with pytest.raises(ConflictError, match="already in favorites"):
        repo.save(_new_favorite(existing.client_id, 4))
    session.rollback()


def test_delete_drops_lookup_key(repo, cache, session):
    favorite = FavoriteProductFactory(product_id=6)
    client_id = favorite.client_id
    repo.find_by_client_and_product(client_id, 6)
    assert isinstance(cache.get(client_product_key(client_id, 6)), dict)

    assert repo.delete(client_id, 6) is True
    session.commit()

    assert cache.get(client_product_key(client_id, 6)) is None
    assert repo.find_by_client_and_product(client_id, 6) is None
    assert repo.delete(client_id, 6) is False


def test_other_clients_keys_survive_invalidation(repo, cache):
    mine = FavoriteProductFactory()
    theirs = FavoriteProductFactory()
    repo.find_by_client_id(mine.client_id)
    repo.find_by_client_id(theirs.client_id)

    repo.invalidate_client(mine.client_id)

    assert cache.get(client_list_key(mine.client_id)) is None
    assert cache.get(client_list_key(theirs.client_id)) is not None


def test_unit_of_work_invalidates_only_after_commit(cache, session):
    existing = FavoriteProductFactory(product_id=1)
    client_id = existing.client_id
    pre_commit_list = [existing.to_snapshot()]
    real_commit = session.commit

    def concurrent_read_then_commit():
        # Another request lists favorites before this transaction commits
        cache.set(client_list_key(client_id), pre_commit_list, 1800)
        real_commit()

    uow = SQLAlchemyUnitOfWork(cache=cache)
    with mock.patch.object(uow.session, "commit", side_effect=concurrent_read_then_commit):
        with uow:
            uow.favorites.save(_new_favorite(client_id, 2))

    assert cache.get(client_list_key(client_id)) is None
    assert {f.product_id for f in uow.favorites.find_by_client_id(client_id)} == {1, 2}


def test_delete_in_unit_of_work_invalidates_only_after_commit(cache, session):
    favorite = FavoriteProductFactory(product_id=6)
    client_id = favorite.client_id
    pre_commit_lookup = favorite.to_snapshot()
    real_commit = session.commit

    def concurrent_read_then_commit():
        cache.set(client_product_key(client_id, 6), pre_commit_lookup, 1800)
        real_commit()

    uow = SQLAlchemyUnitOfWork(cache=cache)
    with mock.patch.object(uow.session, "commit", side_effect=concurrent_read_then_commit):
        with uow:
            assert uow.favorites.delete(client_id, 6) is True

    assert uow.favorites.find_by_client_and_product(client_id, 6) is None


def test_rolled_back_write_keeps_cached_entries(cache, session):
    existing = FavoriteProductFactory(product_id=1)
    client_id = existing.client_id
    repo = CachedFavoriteProductRepository(FavoriteProductRepository(session=session), cache)
    repo.find_by_client_id(client_id)

    with pytest.raises(RuntimeError):
        with SQLAlchemyUnitOfWork(cache=cache) as uow:
            uow.favorites.save(_new_favorite(client_id, 2))
            assert cache.get(client_list_key(client_id)) is not None
            raise RuntimeError("boom")

    assert [item["product_id"] for item in cache.get(client_list_key(client_id))] == [1]
