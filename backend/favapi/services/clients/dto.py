"""
DTOs for ClientService.

Data Transfer Objects isolate the service layer from ORM models, so nothing
outside the unit of work ever sees a session-bound instance or a password hash.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class ClientCreateIn:
    """
    Input DTO for signup.

    :param name: Display name.
    :param email: Login email (normalized by the model).
    :param password: Raw password, hashed by the model setter.
    """

    name: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class ClientUpdateIn:
    """
    Partial update; ``None`` leaves a field unchanged.

    :param name: New display name.
    :param email: New email (must stay unique).
    :param password: New raw password.
    """

    name: str | None = None
    email: str | None = None
    password: str | None = None

    def changes(self) -> dict[str, Any]:
        return {
            k: v
            for k, v in {"name": self.name, "email": self.email, "password": self.password}.items()
            if v is not None
        }


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class ClientOut:
    """
    Public-safe client representation.

    :param id: Client identifier.
    :param name: Display name.
    :param email: Normalized email.
    :param created_at: Creation timestamp.
    :param updated_at: Last update timestamp.
    """

    id: int
    name: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
