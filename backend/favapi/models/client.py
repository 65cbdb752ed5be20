"""Client model: the authenticated identity owning favorites and sessions."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from werkzeug.security import check_password_hash, generate_password_hash

from favapi.core.extensions import db
from favapi.services._shared.errors import ValidationError

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .favorite_product import FavoriteProduct
    from .user_session import UserSession

NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 6

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class Client(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    API consumer who signs up, logs in and curates a list of favorite products.

    Fields
    ------
    name : str
        Display name, 1-255 characters, never blank.
    email : str
        Login email. Stored normalized (lowercase, trimmed). Globally unique.
    password_hash : str
        Hashed password (write-only setter via ``password``). Never serialized.
    created_at / updated_at : datetime
        Timestamps (from mixin).

    Invariants are checked on construction and on every assignment; a
    violation raises :class:`~favapi.services._shared.errors.ValidationError`.
    """

    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    email: Mapped[str] = mapped_column(String(EMAIL_MAX_LENGTH), nullable=False)
    password_hash: Mapped[str] = mapped_column("password", String(255), nullable=False)

    favorites: Mapped[list[FavoriteProduct]] = relationship(
        back_populates="client",
        cascade="all, delete-orphan",
    )
    sessions: Mapped[list[UserSession]] = relationship(
        back_populates="client",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_clients_email"),
        Index("ix_clients_email", "email"),
    )

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """
        Validate, hash and set the password.

        :param raw: Plain text password to hash.
        :type raw: str
        :raises ValidationError: If the password is shorter than six characters.
        """
        if not isinstance(raw, str) or len(raw) < PASSWORD_MIN_LENGTH:
            raise ValidationError(
                f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
            )
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :returns: ``True`` if it matches; otherwise ``False``.
        """
        if not self.password_hash or not isinstance(raw, str):
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Validators --------------------
    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("Name is required")
        if len(value) > NAME_MAX_LENGTH:
            raise ValidationError(f"Name must not exceed {NAME_MAX_LENGTH} characters")
        return value

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :returns: Normalized email (lowercased/trimmed).
        :raises ValidationError: If email is missing, malformed or too long.
        """
        if not value or not isinstance(value, str):
            raise ValidationError("Email is required")
        v = value.strip().lower()
        if len(v) > EMAIL_MAX_LENGTH:
            raise ValidationError(f"Email must not exceed {EMAIL_MAX_LENGTH} characters")
        if not EMAIL_RE.match(v):
            raise ValidationError("Invalid email format")
        return v

    @validates("password_hash")
    def _guard_password_hash(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value:
            raise ValidationError("Password is required")
        return value
