"""Durable session store keyed by token id (``jti``)."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import delete, select, update
from sqlalchemy.dialects import postgresql, sqlite

from favapi.models.user_session import UserSession
from favapi.repositories.base import BaseRepository

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionRepository(BaseRepository[UserSession]):
    """
    Revocation and expiry state for every issued token.

    Absence of a row is treated exactly like a revoked token: callers cannot
    tell an unknown ``jti`` from a revoked one.
    """

    model = UserSession

    def _filterable_fields(self):
        return {"jti": UserSession.jti, "client_id": UserSession.client_id}

    def store_session(self, client_id: int, jti: str, expires_at: datetime) -> None:
        """
        Insert a session row, or extend ``expires_at`` if ``jti`` already exists.

        The conflict branch only touches ``expires_at``; ``revoked_at`` is never
        reset, so re-storing a revoked token keeps it revoked.

        :param client_id: Owning client.
        :param jti: Token identifier.
        :param expires_at: Absolute expiry (timezone-aware).
        """
        dialect = self.session.get_bind().dialect.name
        insert_fn = _UPSERT_DIALECTS.get(dialect)
        if insert_fn is not None:
            stmt = insert_fn(UserSession).values(
                client_id=client_id,
                jti=jti,
                expires_at=expires_at,
                created_at=_utcnow(),
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[UserSession.jti],
                set_={"expires_at": stmt.excluded.expires_at},
            )
            self.session.execute(stmt)
            return

        # Portable fallback: read then write inside the caller's transaction
        existing = self.find_one(jti=jti)
        if existing is None:
            self.add(UserSession(client_id=client_id, jti=jti, expires_at=expires_at))
        else:
            existing.expires_at = expires_at
            self.flush()

    def is_session_revoked(self, jti: str) -> bool:
        """
        Return ``True`` unless a live, unrevoked row exists for ``jti``.

        Missing, expired and revoked rows all yield ``True``.
        """
        stmt = select(UserSession.revoked_at).where(
            UserSession.jti == jti,
            UserSession.expires_at > _utcnow(),
        )
        row = self.session.execute(stmt.limit(1)).first()
        if row is None:
            return True
        return row.revoked_at is not None

    def revoke_token(self, jti: str) -> bool:
        """
        Mark the session as revoked.

        :returns: Whether a row was affected. Already-revoked rows keep their
            original ``revoked_at`` and report ``False``.
        """
        stmt = (
            update(UserSession)
            .where(UserSession.jti == jti, UserSession.revoked_at.is_(None))
            .values(revoked_at=_utcnow())
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return (result.rowcount or 0) > 0

    def revoke_all_for_client(self, client_id: int) -> int:
        """Revoke every live session of a client. Returns the number revoked."""
        stmt = (
            update(UserSession)
            .where(UserSession.client_id == client_id, UserSession.revoked_at.is_(None))
            .values(revoked_at=_utcnow())
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount or 0)

    def purge_expired(self, *, now: datetime | None = None) -> int:
        """Delete rows whose expiry has passed. Returns the number deleted."""
        stmt = (
            delete(UserSession)
            .where(UserSession.expires_at <= (now or _utcnow()))
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount or 0)
