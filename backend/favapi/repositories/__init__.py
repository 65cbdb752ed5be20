"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from favapi.repositories.base import BaseRepository
from favapi.repositories.cached_favorite_product import CachedFavoriteProductRepository
from favapi.repositories.client import ClientRepository
from favapi.repositories.favorite_product import FavoriteProductRepository
from favapi.repositories.session import SessionRepository

__all__ = [
    "BaseRepository",
    "ClientRepository",
    "SessionRepository",
    "FavoriteProductRepository",
    "CachedFavoriteProductRepository",
]
