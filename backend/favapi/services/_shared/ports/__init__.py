"""
favapi.services._shared.ports
=============================

Collection of *ports* (hexagonal interfaces) that decouple the service layer
from concrete infrastructure.

Modules
-------
- :mod:`token_codec`:
    :class:`~.TokenCodec` and the :class:`~.DecodeError` value it returns.

- :mod:`cache`:
    :class:`~.CacheRepository`, plus :class:`~.NullCache` and the
    :class:`~.InMemoryCache` test double.

- :mod:`product_catalog`:
    :class:`~.ProductCatalog`, :class:`~.CatalogProduct` and the
    :class:`~.InMemoryProductCatalog` test double.

Concrete adapters (PyJWT, Redis, HTTP) live under ``favapi.infra``.
"""

from __future__ import annotations

from .cache import CacheRepository, InMemoryCache, NullCache
from .product_catalog import CatalogProduct, InMemoryProductCatalog, ProductCatalog
from .token_codec import DecodeError, TokenCodec

__all__ = [
    "CacheRepository",
    "NullCache",
    "InMemoryCache",
    "ProductCatalog",
    "CatalogProduct",
    "InMemoryProductCatalog",
    "TokenCodec",
    "DecodeError",
]
