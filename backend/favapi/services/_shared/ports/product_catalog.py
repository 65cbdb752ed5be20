from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class CatalogProduct:
    """
    Product as returned by the external catalog, normalized.

    :param id: Catalog identifier.
    :param title: Product title.
    :param image: Image URL, when provided.
    :param price: Unit price, when provided.
    :param rating: ``rating.rate`` from the catalog, when provided.
    :param description: Long description, when provided.
    :param category: Category label, when provided.
    """

    id: int
    title: str
    image: str | None = None
    price: float | None = None
    rating: float | None = None
    description: str | None = None
    category: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "image": self.image,
            "price": self.price,
            "rating": self.rating,
            "description": self.description,
            "category": self.category,
        }


class ProductCatalog(Protocol):
    """
    Read-only port to the external product catalog.

    ``get_product`` returns ``None`` for unknown products and raises
    :class:`~favapi.services._shared.errors.UpstreamError` on transport
    failures.
    """

    def get_product(self, product_id: int) -> CatalogProduct | None: ...

    def list_products(self) -> list[CatalogProduct]: ...


class InMemoryProductCatalog(ProductCatalog):
    """Deterministic catalog double used in unit tests."""

    def __init__(self, products: list[CatalogProduct] | None = None) -> None:
        self._products = {p.id: p for p in products or []}
        self.calls: list[int] = []

    def add(self, product: CatalogProduct) -> None:
        self._products[product.id] = product

    def get_product(self, product_id: int) -> CatalogProduct | None:
        self.calls.append(product_id)
        return self._products.get(product_id)

    def list_products(self) -> list[CatalogProduct]:
        return list(self._products.values())
