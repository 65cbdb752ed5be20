"""Durable store for favorite product snapshots."""

from __future__ import annotations

from typing import cast

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from favapi.models.favorite_product import FavoriteProduct
from favapi.repositories.base import BaseRepository
from favapi.services._shared.errors import ConflictError


class FavoriteProductRepository(BaseRepository[FavoriteProduct]):
    """Persistence-only repository for :class:`FavoriteProduct`."""

    model = FavoriteProduct

    def _filterable_fields(self):
        return {
            "client_id": FavoriteProduct.client_id,
            "product_id": FavoriteProduct.product_id,
        }

    def find_by_client_id(self, client_id: int) -> list[FavoriteProduct]:
        """Return the client's favorites, most recently added first."""
        stmt = (
            select(FavoriteProduct)
            .where(FavoriteProduct.client_id == client_id)
            .order_by(FavoriteProduct.created_at.desc(), FavoriteProduct.id.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def find_by_client_and_product(
        self, client_id: int, product_id: int
    ) -> FavoriteProduct | None:
        stmt = select(FavoriteProduct).where(
            FavoriteProduct.client_id == client_id,
            FavoriteProduct.product_id == product_id,
        )
        return cast(FavoriteProduct | None, self.session.execute(stmt).scalars().first())

    def exists_for(self, client_id: int, product_id: int) -> bool:
        return self.exists(client_id=client_id, product_id=product_id)

    def save(self, favorite: FavoriteProduct) -> FavoriteProduct:
        """
        Persist a new favorite and flush to materialize its id.

        :raises ConflictError: When the (client, product) pair already exists.
            The unique constraint is the backstop for concurrent adds.
        """
        try:
            self.session.add(favorite)
            self.session.flush()
        except IntegrityError as exc:
            raise ConflictError("FavoriteProduct", "Product already in favorites") from exc
        return favorite

    def remove(self, client_id: int, product_id: int) -> bool:
        """Delete the favorite; returns whether a row was removed."""
        stmt = (
            delete(FavoriteProduct)
            .where(
                FavoriteProduct.client_id == client_id,
                FavoriteProduct.product_id == product_id,
            )
            .execution_options(synchronize_session=False)
        )
        return (self.session.execute(stmt).rowcount or 0) > 0
