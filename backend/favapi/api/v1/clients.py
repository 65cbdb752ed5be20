"""Client endpoints.

Listing, lookup and signup are public; update and delete require the
caller to be the client being modified.
"""

from __future__ import annotations

from flask import Blueprint

from favapi.api.deps import container, current_identity, json_response, load_json, require_auth, timing
from favapi.schemas import ClientCreateSchema, ClientSchema, ClientUpdateSchema
from favapi.services.clients.dto import ClientCreateIn, ClientUpdateIn

bp = Blueprint("clients", __name__)

client_schema = ClientSchema()
client_list_schema = ClientSchema(many=True)
client_create_schema = ClientCreateSchema()
client_update_schema = ClientUpdateSchema()


@bp.get("")
@timing
def list_clients():
    """Return every client, newest first."""

    clients = container().client_service.list_clients()
    return json_response({"data": client_list_schema.dump(clients), "total": len(clients)})


@bp.get("/<int:client_id>")
@timing
def get_client(client_id: int):
    client = container().client_service.get_client(client_id)
    return json_response({"data": client_schema.dump(client), "total": 1})


@bp.post("")
@timing
def create_client():
    """Sign up a new client."""

    payload = client_create_schema.load(load_json())
    client = container().client_service.create_client(ClientCreateIn(**payload))
    return json_response({"data": client_schema.dump(client), "total": 1}, status=201)


@bp.route("/<int:client_id>", methods=["PUT", "PATCH"])
@require_auth
@timing
def update_client(client_id: int):
    """Apply a partial update to the caller's own record."""

    payload = client_update_schema.load(load_json())
    client = container().client_service.update_client(
        current_identity().id, client_id, ClientUpdateIn(**payload)
    )
    return json_response({"data": client_schema.dump(client), "total": 1})


@bp.delete("/<int:client_id>")
@require_auth
@timing
def delete_client(client_id: int):
    """Delete the caller's own record."""

    client = container().client_service.delete_client(current_identity().id, client_id)
    return json_response({"data": client_schema.dump(client), "total": 1})
