# tests/unit/services/test_product_service.py
from __future__ import annotations

import pytest
from favapi.services._shared.errors import NotFoundError
from favapi.services._shared.ports.product_catalog import CatalogProduct, InMemoryProductCatalog
from favapi.services.products.service import ProductService


@pytest.fixture()
def catalog():
    return InMemoryProductCatalog([CatalogProduct(id=1, title="Backpack")])


@pytest.fixture()
def service(catalog):
    return ProductService(catalog=catalog)


def test_get_product(service):
    assert service.get_product(1).title == "Backpack"


@pytest.mark.parametrize("product_id", [0, -5, 2])
def test_get_missing_product(service, product_id):
    with pytest.raises(NotFoundError, match="Product not found"):
        service.get_product(product_id)


def test_non_positive_ids_skip_catalog(service, catalog):
    assert service.product_exists(0) is False
    assert catalog.calls == []
    assert service.product_exists(1) is True


def test_list_products(service):
    assert [p.id for p in service.list_products()] == [1]
