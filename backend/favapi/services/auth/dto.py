# favapi/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: Client email (normalized by the repository).
    :param password: Raw password (to be verified).
    """

    email: str
    password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthIdentity:
    """
    User summary embedded in tokens and attached to authenticated requests.

    :param id: Client identifier.
    :param name: Client display name.
    :param email: Client email.
    """

    id: int
    name: str
    email: str

    def to_claim(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email}

    @classmethod
    def from_claim(cls, claim: Any) -> AuthIdentity | None:
        """Parse the ``user`` claim; ``None`` when its shape is wrong."""
        if not isinstance(claim, dict):
            return None
        raw_id, name, email = claim.get("id"), claim.get("name"), claim.get("email")
        if isinstance(raw_id, bool) or not isinstance(raw_id, int):
            return None
        if not isinstance(name, str) or not isinstance(email, str):
            return None
        return cls(id=raw_id, name=name, email=email)


@dataclass(frozen=True, slots=True)
class IssuedToken:
    """
    A freshly signed token and its server-side bookkeeping.

    :param access_token: Encoded token.
    :param jti: Token identifier stored in the session store.
    :param expires_in: Lifetime in seconds.
    :param expires_at: Absolute expiry.
    """

    access_token: str
    jti: str
    expires_in: int
    expires_at: datetime
    token_type: str = "Bearer"


@dataclass(frozen=True, slots=True)
class LoginOut:
    """Result of a successful login: the token plus who it belongs to."""

    token: IssuedToken
    user: AuthIdentity


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param secret: Symmetric signing secret.
    :param issuer: ``iss`` claim.
    :param audience: ``aud`` claim.
    :param access_expires: Token lifetime.
    """

    secret: str
    issuer: str
    audience: str
    access_expires: timedelta = timedelta(hours=24)
