# favapi/services/favorites/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class FavoriteOut:
    """
    Favorite product snapshot as exposed by the API.

    :param id: Favorite row identifier.
    :param client_id: Owning client.
    :param product_id: Catalog product identifier.
    :param title: Product title at the time it was favorited.
    :param image: Product image URL, if any.
    :param price: Product price, if any.
    :param rating: Product rating in ``[0, 5]``, if any.
    :param created_at: When it was added.
    """

    id: int
    client_id: int
    product_id: int
    title: str
    image: str | None
    price: float | None
    rating: float | None
    created_at: datetime | None
