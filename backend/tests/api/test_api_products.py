# tests/api/test_api_products.py
from __future__ import annotations

import pytest

from tests.factories.client import ClientFactory
from tests.helpers.auth import bearer, login


@pytest.fixture()
def headers(client, app):
    me = ClientFactory()
    return bearer(login(client, me.email))


def test_list_products(client, headers):
    body = client.get("/api/v1/products", headers=headers).get_json()
    assert body["total"] == 3
    assert body["data"][0]["title"] == "Fjallraven Backpack"


def test_get_product(client, headers):
    response = client.get("/api/v1/products/2", headers=headers)
    assert response.status_code == 200
    assert response.get_json()["data"]["price"] == 22.3


@pytest.mark.parametrize("product_id", ["0", "-1", "999"])
def test_missing_products_are_404(client, headers, product_id):
    response = client.get(f"/api/v1/products/{product_id}", headers=headers)
    assert response.status_code == 404
    assert response.get_json() == {"error": "Product not found"}
