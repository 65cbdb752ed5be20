"""
ClientService
=============

Application service for the ``Client`` aggregate: signup, lookup, partial
update and self-deletion.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from favapi.models.client import Client
from favapi.services._shared.base import BaseService
from favapi.services._shared.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    violates,
)
from favapi.services.clients.dto import ClientCreateIn, ClientOut, ClientUpdateIn

log = logging.getLogger(__name__)

EMAIL_TAKEN = "Email already exists"
CLIENT_NOT_FOUND = "Client not found"
NOT_YOUR_CLIENT = "You are not authorized to update this client"


def _to_out(client: Client) -> ClientOut:
    return ClientOut(
        id=client.id,
        name=client.name,
        email=client.email,
        created_at=client.created_at,
        updated_at=client.updated_at,
    )


def _email_conflict(exc: IntegrityError) -> bool:
    # PostgreSQL names the constraint; SQLite names the column
    return violates(exc, "uq_clients_email") or violates(exc, "clients.email")


class ClientService(BaseService):
    """
    Responsibilities
    ----------------
    - Register clients ensuring email uniqueness (pre-check + constraint backstop).
    - Retrieve clients.
    - Apply partial updates with ownership enforced by the caller's identity.
    - Delete a client together with its sessions and cached favorites.
    """

    # --------------------------------------------------------------------- #
    # Queries
    # --------------------------------------------------------------------- #

    def list_clients(self) -> list[ClientOut]:
        with self.ro_uow() as uow:
            return [_to_out(c) for c in uow.clients.list_newest_first()]

    def get_client(self, client_id: int) -> ClientOut:
        """
        :raises NotFoundError: If the client does not exist.
        """
        with self.ro_uow() as uow:
            client = uow.clients.get(client_id)
            if client is None:
                raise NotFoundError("Client", client_id, CLIENT_NOT_FOUND)
            return _to_out(client)

    # --------------------------------------------------------------------- #
    # Commands
    # --------------------------------------------------------------------- #

    def create_client(self, dto: ClientCreateIn) -> ClientOut:
        """
        Sign up a new client.

        :raises ConflictError: When the email is already registered.
        :raises ValidationError: When a field breaks an entity invariant.
        """
        with self.rw_uow() as uow:
            if uow.clients.exists_by_email(dto.email):
                raise ConflictError("Client", EMAIL_TAKEN)
            client = Client(name=dto.name, email=dto.email, password=dto.password)
            try:
                uow.clients.add(client)
            except IntegrityError as exc:
                if _email_conflict(exc):
                    raise ConflictError("Client", EMAIL_TAKEN) from exc
                raise
            out = _to_out(client)
        log.info("client.created", extra={"client_id": out.id})
        return out

    def update_client(self, actor_id: int | None, client_id: int, dto: ClientUpdateIn) -> ClientOut:
        """
        Apply a partial update to the caller's own record.

        :raises ForbiddenError: When ``actor_id`` is not ``client_id``.
        :raises ValidationError: When no field is provided.
        :raises NotFoundError: When the client no longer exists.
        :raises ConflictError: When the new email belongs to someone else.
        """
        self.ensure_owner(actor_id, client_id, msg=NOT_YOUR_CLIENT)
        changes = dto.changes()
        if not changes:
            raise ValidationError("No data provided for update")

        with self.rw_uow() as uow:
            client = uow.clients.get(client_id)
            if client is None:
                raise NotFoundError("Client", client_id, CLIENT_NOT_FOUND)
            if "email" in changes and uow.clients.exists_by_email(
                changes["email"], exclude_id=client_id
            ):
                raise ConflictError("Client", EMAIL_TAKEN)
            try:
                uow.clients.assign_updates(client, changes)
            except IntegrityError as exc:
                if _email_conflict(exc):
                    raise ConflictError("Client", EMAIL_TAKEN) from exc
                raise
            out = _to_out(client)
        log.info("client.updated", extra={"client_id": client_id})
        return out

    def delete_client(self, actor_id: int | None, client_id: int) -> ClientOut:
        """
        Delete the caller's own record and return what was removed.

        Session rows and favorites go with it, so every outstanding token for
        this client stops validating. Cached favorites are dropped once the
        delete has committed.
        """
        self.ensure_owner(actor_id, client_id, msg=NOT_YOUR_CLIENT)
        with self.rw_uow() as uow:
            client = uow.clients.get(client_id)
            if client is None:
                raise NotFoundError("Client", client_id, CLIENT_NOT_FOUND)
            out = _to_out(client)
            uow.clients.delete(client)
            uow.favorites.invalidate_client(client_id)
        log.info("client.deleted", extra={"client_id": client_id})
        return out
