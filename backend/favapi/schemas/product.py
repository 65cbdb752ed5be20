"""Catalog product schema."""

from __future__ import annotations

from marshmallow import Schema, fields


class ProductSchema(Schema):
    """Product as served from the external catalog."""

    id = fields.Integer(required=True)
    title = fields.String(required=True)
    image = fields.String(allow_none=True)
    price = fields.Float(allow_none=True)
    rating = fields.Float(allow_none=True)
    description = fields.String(allow_none=True)
    category = fields.String(allow_none=True)
