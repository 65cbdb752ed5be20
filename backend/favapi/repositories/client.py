"""Client repository for persistence and credential lookups."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from favapi.models.client import Client
from favapi.repositories.base import BaseRepository, apply_sorting


class ClientRepository(BaseRepository[Client]):
    """Persistence-only repository for :class:`Client`.

    It never issues tokens or touches sessions; only DB-level client
    management and credential verification.
    """

    model = Client

    def _sortable_fields(self):
        return {
            "id": Client.id,
            "name": Client.name,
            "email": Client.email,
            "created_at": Client.created_at,
        }

    def _filterable_fields(self):
        return {"email": Client.email}

    def _updatable_fields(self):
        # ``password`` goes through the hashing setter on the model
        return {"name", "email", "password"}

    # ---------------------------- Lookup helpers ----------------------------

    def list_newest_first(self) -> list[Client]:
        """Return every client ordered by creation date, newest first."""
        stmt = apply_sorting(
            select(Client),
            self._sortable_fields(),
            ["-created_at"],
            pk_attr=Client.id,
            pk_desc=True,
        )
        return list(self.session.execute(stmt).scalars().all())

    def get_by_email(self, email: str) -> Client | None:
        """Fetch a client by email (case-insensitive).

        :param email: Email address to normalise and search.
        :returns: Client instance or ``None`` when not found.
        """
        stmt = select(Client).where(Client.email == email.lower().strip())
        return cast(Client | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str, *, exclude_id: int | None = None) -> bool:
        """Return ``True`` when a client with the provided email exists.

        :param email: Email address to normalise and search.
        :param exclude_id: Ignore this client (used when it updates itself).
        """
        stmt = select(Client.id).where(Client.email == email.lower().strip())
        if exclude_id is not None:
            stmt = stmt.where(Client.id != exclude_id)
        return bool(self.session.execute(stmt.limit(1)).first())

    def authenticate(self, email: str, password: str) -> Client | None:
        """Return the client when the password matches its stored hash."""
        client = self.get_by_email(email)
        if not client or not client.verify_password(password):
            return None
        return client
