"""Favorite product schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class AddFavoriteSchema(Schema):
    """Payload for adding a catalog product to a client's favorites."""

    class Meta:
        unknown = EXCLUDE

    product_id = fields.Integer(
        required=True,
        strict=True,
        validate=validate.Range(min=1, error="product_id must be positive"),
    )


class FavoriteSchema(Schema):
    """Stored snapshot of a favorited product."""

    id = fields.Integer(required=True)
    client_id = fields.Integer(required=True)
    product_id = fields.Integer(required=True)
    title = fields.String(required=True)
    image = fields.String(allow_none=True)
    price = fields.Float(allow_none=True)
    rating = fields.Float(allow_none=True)
    created_at = fields.DateTime(allow_none=True)
