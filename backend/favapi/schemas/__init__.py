"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import AuthUserSchema, LoginSchema, TokenResponseSchema
from .client import ClientCreateSchema, ClientSchema, ClientUpdateSchema
from .favorite import AddFavoriteSchema, FavoriteSchema
from .product import ProductSchema

__all__ = [
    "AuthUserSchema",
    "LoginSchema",
    "TokenResponseSchema",
    "ClientCreateSchema",
    "ClientSchema",
    "ClientUpdateSchema",
    "AddFavoriteSchema",
    "FavoriteSchema",
    "ProductSchema",
]
