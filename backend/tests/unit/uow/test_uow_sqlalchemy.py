# tests/unit/uow/test_uow_sqlalchemy.py
from __future__ import annotations

import pytest
from favapi.models.client import Client
from favapi.repositories.cached_favorite_product import CachedFavoriteProductRepository
from favapi.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork
from sqlalchemy import func, select


def _count(session) -> int:
    return session.execute(select(func.count()).select_from(Client)).scalar_one()


def test_writer_commits_on_clean_exit(app, session):
    with SQLAlchemyUnitOfWork() as uow:
        uow.clients.add(Client(name="Ana", email="ana@example.com", password="secret1"))
    session.rollback()
    assert _count(session) == 1


def test_writer_rolls_back_when_block_raises(app, session):
    with pytest.raises(RuntimeError):
        with SQLAlchemyUnitOfWork() as uow:
            uow.clients.add(Client(name="Ana", email="ana@example.com", password="secret1"))
            raise RuntimeError("boom")
    assert _count(session) == 0


def test_reader_blocks_flush_and_commit(app, session):
    with pytest.raises(RuntimeError, match="flush blocked"):
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            uow.session.add(Client(name="Ana", email="ana@example.com", password="secret1"))
            uow.session.flush()

    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        with pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()
    assert _count(session) == 0


def test_favorites_repository_is_always_cache_aware(app):
    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        assert isinstance(uow.favorites, CachedFavoriteProductRepository)
