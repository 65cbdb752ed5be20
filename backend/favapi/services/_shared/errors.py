"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. They serve as stable contracts between repositories, domain
models, and application services.

Every error carries an :class:`ErrorKind`. The HTTP boundary in
``favapi/core/errors.py`` picks the status code from the kind alone, never
from the message text.
"""

from __future__ import annotations

from enum import Enum

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name; SQLite reports the columns, so
    callers may pass either.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        Constraint name or column list to look for in the driver message.

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


class ErrorKind(str, Enum):
    """Closed set of failure categories understood by the boundary layer."""

    VALIDATION = "validation"
    AUTH = "auth"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UPSTREAM = "upstream"
    INTERNAL = "internal"


# --------------------------------------------------------------------------- #
# Base type
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories, models or services.
    - ``kind`` drives the HTTP status; ``message`` is safe to show clients.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str = "Unexpected error") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class ValidationError(ServiceError, ValueError):
    """Raised when an entity invariant or input shape/range is violated."""

    kind = ErrorKind.VALIDATION


class AuthError(ServiceError):
    """Raised for missing, invalid, expired or revoked credentials.

    The message never says which of those it was.
    """

    kind = ErrorKind.AUTH

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


class ForbiddenError(ServiceError):
    """Raised when an authenticated client acts on another client's resource."""

    kind = ErrorKind.FORBIDDEN

    def __init__(
        self, message: str = "You are not authorized to access this resource"
    ) -> None:
        super().__init__(message)


class NotFoundError(ServiceError):
    """
    Raised when an entity is not found.

    :param entity: Entity name (e.g., "Client").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    :param message: Optional client-facing message; defaults to ``"<entity> not found"``.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, key: str | int | None = None, message: str | None = None):
        super().__init__(message or f"{entity} not found")
        self.entity = entity
        self.key = key


class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "Client").
    :type entity: str
    :param detail: Short human-readable explanation, shown to clients.
    :type detail: str
    """

    kind = ErrorKind.CONFLICT

    def __init__(self, entity: str, detail: str) -> None:
        super().__init__(detail)
        self.entity = entity
        self.detail = detail


class UpstreamError(ServiceError):
    """Raised when the external product catalog fails at the transport level."""

    kind = ErrorKind.UPSTREAM

    def __init__(self, message: str = "Product service unavailable") -> None:
        super().__init__(message)
