"""
Unit of Work contract shared by the read-write and read-only implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from favapi.repositories import (
        CachedFavoriteProductRepository,
        ClientRepository,
        SessionRepository,
    )


class UnitOfWork(ABC):
    """
    One transaction over the client, session and favorites stores.

    Responsibilities:
    - Hand out repositories bound to the same session.
    - Commit on success, rollback on error.
    - Run cache invalidations queued during the block only once the commit
      has succeeded.
    """

    clients: ClientRepository
    sessions: SessionRepository
    favorites: CachedFavoriteProductRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
    @abstractmethod
    def after_commit(self, callback: Callable[[], None]) -> None: ...
