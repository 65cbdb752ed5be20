"""Catalog proxy endpoints."""

from __future__ import annotations

from flask import Blueprint

from favapi.api.deps import container, json_response, require_auth, timing
from favapi.schemas import ProductSchema

bp = Blueprint("products", __name__)

product_schema = ProductSchema()
product_list_schema = ProductSchema(many=True)


@bp.get("")
@require_auth
@timing
def list_products():
    products = container().product_service.list_products()
    return json_response({"data": product_list_schema.dump(products), "total": len(products)})


@bp.get("/<int(signed=True):product_id>")
@require_auth
@timing
def get_product(product_id: int):
    """Return one catalog product; ids that are not positive are never found."""

    product = container().product_service.get_product(product_id)
    return json_response({"data": product_schema.dump(product), "total": 1})
