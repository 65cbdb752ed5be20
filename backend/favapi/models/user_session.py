"""Server-side record of an issued session token."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from favapi.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin

if TYPE_CHECKING:
    from .client import Client


class UserSession(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """
    One row per issued token, keyed by its ``jti``.

    ``revoked_at`` is set once and never cleared. A token is usable only while
    its row exists, ``expires_at`` is in the future and ``revoked_at`` is null.
    """

    __tablename__ = "user_sessions"

    client_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    jti: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    client: Mapped[Client] = relationship(back_populates="sessions")

    __table_args__ = (
        UniqueConstraint("jti", name="uq_user_sessions_jti"),
        Index("ix_user_sessions_client_id", "client_id"),
        Index("ix_user_sessions_expires_at", "expires_at"),
    )

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None
