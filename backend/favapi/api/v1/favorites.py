"""Favorite product endpoints nested under a client."""

from __future__ import annotations

from flask import Blueprint

from favapi.api.deps import container, current_identity, json_response, load_json, require_auth, timing
from favapi.schemas import AddFavoriteSchema, FavoriteSchema

bp = Blueprint("favorites", __name__)

favorite_schema = FavoriteSchema()
favorite_list_schema = FavoriteSchema(many=True)
add_favorite_schema = AddFavoriteSchema()


@bp.get("/<int:client_id>/favorites")
@require_auth
@timing
def list_favorites(client_id: int):
    """Return the caller's favorites, most recent first."""

    favorites = container().favorite_service.list_favorites(current_identity().id, client_id)
    return json_response({"data": favorite_list_schema.dump(favorites), "total": len(favorites)})


@bp.post("/<int:client_id>/favorites")
@require_auth
@timing
def add_favorite(client_id: int):
    """Snapshot a catalog product into the caller's favorites."""

    payload = add_favorite_schema.load(load_json())
    favorite = container().favorite_service.add_favorite(
        current_identity().id, client_id, payload["product_id"]
    )
    return json_response({"data": favorite_schema.dump(favorite), "total": 1}, status=201)


@bp.delete("/<int:client_id>/favorites/<int(signed=True):product_id>")
@require_auth
@timing
def remove_favorite(client_id: int, product_id: int):
    container().favorite_service.remove_favorite(current_identity().id, client_id, product_id)
    return json_response({"message": "Product successfully removed from favorites"})
