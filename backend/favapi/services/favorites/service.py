# favapi/services/favorites/service.py
from __future__ import annotations

import logging
from typing import Any

from favapi.models.favorite_product import FavoriteProduct
from favapi.services._shared.base import BaseService
from favapi.services._shared.errors import ConflictError, NotFoundError, ValidationError
from favapi.services._shared.ports.product_catalog import ProductCatalog
from favapi.services.favorites.dto import FavoriteOut

log = logging.getLogger(__name__)

CLIENT_NOT_FOUND = "Client not found"
ALREADY_FAVORITE = "Product already in favorites"
PRODUCT_NOT_FOUND = "Product not found in external API"
NOT_A_FAVORITE = "Product not in favorites"


def _to_out(favorite: FavoriteProduct) -> FavoriteOut:
    return FavoriteOut(
        id=favorite.id,
        client_id=favorite.client_id,
        product_id=favorite.product_id,
        title=favorite.product_title,
        image=favorite.product_image,
        price=favorite.product_price,
        rating=favorite.product_rating,
        created_at=favorite.created_at,
    )


class FavoriteService(BaseService):
    """
    Manage a client's favorite products.

    Reads go through the cached favorites repository. Adding a favorite runs
    the checks in this order: the client exists, the product is not already a
    favorite, the catalog knows the product. Only then is the snapshot written.
    """

    def __init__(self, *, catalog: ProductCatalog, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.catalog = catalog

    def list_favorites(self, actor_id: int | None, client_id: int) -> list[FavoriteOut]:
        """
        :raises ForbiddenError: When listing another client's favorites.
        :raises NotFoundError: When the client does not exist.
        """
        self.ensure_owner(actor_id, client_id)
        with self.ro_uow() as uow:
            if uow.clients.get(client_id) is None:
                raise NotFoundError("Client", client_id, CLIENT_NOT_FOUND)
            return [_to_out(f) for f in uow.favorites.find_by_client_id(client_id)]

    def add_favorite(self, actor_id: int | None, client_id: int, product_id: int) -> FavoriteOut:
        """
        Snapshot a catalog product into the client's favorites.

        :raises ValidationError: When ``product_id`` is not positive.
        :raises NotFoundError: When the client or the catalog product is missing.
        :raises ConflictError: When the product is already a favorite. A
            concurrent add losing the unique-constraint race gets this too.
        :raises UpstreamError: When the catalog cannot be reached.
        """
        self.ensure_owner(actor_id, client_id)
        if isinstance(product_id, bool) or not isinstance(product_id, int) or product_id <= 0:
            raise ValidationError("product_id must be positive")

        with self.ro_uow() as uow:
            if uow.clients.get(client_id) is None:
                raise NotFoundError("Client", client_id, CLIENT_NOT_FOUND)
            if uow.favorites.exists(client_id, product_id):
                raise ConflictError("FavoriteProduct", ALREADY_FAVORITE)

        # Network call stays outside any open transaction
        product = self.catalog.get_product(product_id)
        if product is None:
            raise NotFoundError("Product", product_id, PRODUCT_NOT_FOUND)

        with self.rw_uow() as uow:
            favorite = FavoriteProduct(
                client_id=client_id,
                product_id=product.id,
                product_title=product.title,
                product_image=product.image,
                product_price=product.price,
                product_rating=product.rating,
            )
            uow.favorites.save(favorite)
            out = _to_out(favorite)
        log.info("favorite.added", extra={"client_id": client_id})
        return out

    def remove_favorite(self, actor_id: int | None, client_id: int, product_id: int) -> None:
        """
        :raises NotFoundError: When the client is missing or the product is not a favorite.
        """
        self.ensure_owner(actor_id, client_id)
        with self.rw_uow() as uow:
            if uow.clients.get(client_id) is None:
                raise NotFoundError("Client", client_id, CLIENT_NOT_FOUND)
            if not uow.favorites.delete(client_id, product_id):
                raise NotFoundError("FavoriteProduct", product_id, NOT_A_FAVORITE)
        log.info("favorite.removed", extra={"client_id": client_id})
