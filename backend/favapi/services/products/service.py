# favapi/services/products/service.py
from __future__ import annotations

from favapi.services._shared.errors import NotFoundError
from favapi.services._shared.ports.product_catalog import CatalogProduct, ProductCatalog


class ProductService:
    """Read-only facade over the external product catalog."""

    def __init__(self, *, catalog: ProductCatalog) -> None:
        self.catalog = catalog

    def list_products(self) -> list[CatalogProduct]:
        return self.catalog.list_products()

    def get_product(self, product_id: int) -> CatalogProduct:
        """
        :raises NotFoundError: For ids ``<= 0`` and ids the catalog does not know.
        """
        product = self.catalog.get_product(product_id) if product_id > 0 else None
        if product is None:
            raise NotFoundError("Product", product_id, "Product not found")
        return product

    def product_exists(self, product_id: int) -> bool:
        return product_id > 0 and self.catalog.get_product(product_id) is not None
