# favapi/services/_shared/base.py
from __future__ import annotations

from favapi.repositories.cached_favorite_product import DEFAULT_TTL
from favapi.services._shared.errors import ForbiddenError
from favapi.services._shared.ports.cache import CacheRepository
from favapi.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


def is_owner(*, actor_id: int | str | None, owner_id: int | str) -> bool:
    """Return True if the actor owns the resource."""
    return actor_id is not None and str(actor_id) == str(owner_id)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Hand the shared cache to the repositories of each unit of work.
    * Offer the ownership policy used by every client-scoped operation.

    Notes
    -----
    - Services never touch the global session directly; always use a Unit of Work.
    - Entity invariants live in the models.
    - Errors are raised as :class:`ServiceError` subclasses; the HTTP layer maps
      them by ``kind``.
    """

    def __init__(
        self,
        *,
        cache: CacheRepository | None = None,
        favorites_ttl: int = DEFAULT_TTL,
    ) -> None:
        """
        :param cache: Cache port shared by cached repositories (optional).
        :param favorites_ttl: TTL for cached favorites entries, in seconds.
        """
        self.cache = cache
        self.favorites_ttl = favorites_ttl

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Create a read-write Unit of Work (commits on clean exit)."""
        return SQLAlchemyUnitOfWork(cache=self.cache, favorites_ttl=self.favorites_ttl)

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Create a read-only Unit of Work (always rolls back)."""
        return SQLAlchemyReadOnlyUnitOfWork(cache=self.cache, favorites_ttl=self.favorites_ttl)

    # --------------------------- AuthZ --------------------------------------

    def ensure_owner(
        self, actor_id: int | None, owner_id: int, *, msg: str | None = None
    ) -> None:
        """
        Ensure the authenticated client is the owner of the resource.

        :raises ForbiddenError: If ``actor_id`` differs from ``owner_id``.
        """
        if not is_owner(actor_id=actor_id, owner_id=owner_id):
            raise ForbiddenError(msg) if msg else ForbiddenError()
