"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import suppress

from sqlalchemy import event
from sqlalchemy.orm import Session

from favapi.core.extensions import db
from favapi.repositories import (
    CachedFavoriteProductRepository,
    ClientRepository,
    FavoriteProductRepository,
    SessionRepository,
)
from favapi.repositories.cached_favorite_product import DEFAULT_TTL
from favapi.services._shared.ports.cache import CacheRepository, NullCache
from favapi.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(
        self,
        *,
        session: Session,
        cache: CacheRepository | None = None,
        favorites_ttl: int = DEFAULT_TTL,
    ) -> None:
        self.session = session
        self._after_commit: list[Callable[[], None]] = []
        self.clients = ClientRepository(session=self.session)
        self.sessions = SessionRepository(session=self.session)
        self.favorites = CachedFavoriteProductRepository(
            FavoriteProductRepository(session=self.session),
            cache or NullCache(),
            ttl=favorites_ttl,
            on_commit=self.after_commit,
        )

    def after_commit(self, callback: Callable[[], None]) -> None:
        """Queue ``callback`` to run once the transaction has committed."""
        self._after_commit.append(callback)

    def _run_after_commit(self) -> None:
        callbacks, self._after_commit = self._after_commit, []
        for callback in callbacks:
            callback()


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    Commits on a clean exit, rolls back when the block raises. Callbacks
    queued with :meth:`after_commit` run only after a successful commit and
    are dropped on rollback.
    """

    def __init__(
        self, *, cache: CacheRepository | None = None, favorites_ttl: int = DEFAULT_TTL
    ) -> None:
        super().__init__(session=db.session, cache=cache, favorites_ttl=favorites_ttl)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session begins lazily on first use.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()
        self._run_after_commit()

    def rollback(self) -> None:
        self._after_commit.clear()
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work backed by the Flask-scoped SQLAlchemy session.

    Installs a flush guard so ORM writes fail loudly, and always rolls back on
    exit. ``commit()`` is disallowed.

    Build DTOs inside the ``with`` block: the rollback on exit expires every
    loaded instance.
    """

    def __init__(
        self, *, cache: CacheRepository | None = None, favorites_ttl: int = DEFAULT_TTL
    ) -> None:
        super().__init__(session=db.session, cache=cache, favorites_ttl=favorites_ttl)
        self._target: Session | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        # ``db.session`` is a scoped_session proxy; events need the real Session
        self._target = self.session()  # type: ignore[operator]
        event.listen(self._target, "before_flush", self._block_flush)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            with suppress(Exception):
                self.session.rollback()
        finally:
            if self._target is not None:
                with suppress(Exception):
                    event.remove(self._target, "before_flush", self._block_flush)
                self._target = None

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always, to prevent accidental writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    @staticmethod
    def _block_flush(session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError(
                "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
            )
