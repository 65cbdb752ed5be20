# tests/unit/repositories/test_repository_session.py
"""Session store semantics: upsert, default-deny lookup, revocation, purge."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from favapi.models.user_session import UserSession
from favapi.repositories.session import SessionRepository
from sqlalchemy import select

from tests.factories.client import ClientFactory


def _now() -> datetime:
    return datetime.now(UTC).replace(microsecond=0)


@pytest.fixture
def repo(session) -> SessionRepository:
    return SessionRepository(session=session)


@pytest.fixture
def owner(app):
    return ClientFactory()


def _revoked_at(session, jti: str):
    return session.execute(select(UserSession.revoked_at).where(UserSession.jti == jti)).scalar_one()


def test_stored_session_is_live(repo, owner):
    repo.store_session(owner.id, "jti-live", _now() + timedelta(hours=1))
    assert repo.is_session_revoked("jti-live") is False


def test_unknown_jti_is_treated_as_revoked(repo):
    assert repo.is_session_revoked("never-stored") is True


def test_expired_session_is_treated_as_revoked(repo, owner):
    repo.store_session(owner.id, "jti-old", _now() - timedelta(seconds=1))
    assert repo.is_session_revoked("jti-old") is True


def test_revoke_token_is_idempotent_and_keeps_first_timestamp(repo, session, owner):
    repo.store_session(owner.id, "jti-r", _now() + timedelta(hours=1))

    assert repo.revoke_token("jti-r") is True
    first = _revoked_at(session, "jti-r")
    assert first is not None

    assert repo.revoke_token("jti-r") is False
    assert _revoked_at(session, "jti-r") == first
    assert repo.is_session_revoked("jti-r") is True


def test_revoke_unknown_token_reports_false(repo):
    assert repo.revoke_token("nope") is False


def test_store_again_extends_expiry_but_never_unrevokes(repo, session, owner):
    repo.store_session(owner.id, "jti-u", _now() + timedelta(minutes=5))
    repo.revoke_token("jti-u")

    later = _now() + timedelta(days=2)
    repo.store_session(owner.id, "jti-u", later)

    rows = session.execute(select(UserSession).where(UserSession.jti == "jti-u")).scalars().all()
    assert len(rows) == 1
    session.refresh(rows[0])
    assert rows[0].expires_at.replace(tzinfo=None) == later.replace(tzinfo=None)
    assert rows[0].revoked_at is not None
    assert repo.is_session_revoked("jti-u") is True


def test_revoke_all_for_client_only_touches_live_rows(repo, owner):
    other = ClientFactory()
    expires = _now() + timedelta(hours=1)
    repo.store_session(owner.id, "a1", expires)
    repo.store_session(owner.id, "a2", expires)
    repo.store_session(owner.id, "a3", expires)
    repo.store_session(other.id, "b1", expires)
    repo.revoke_token("a3")

    assert repo.revoke_all_for_client(owner.id) == 2
    assert repo.is_session_revoked("a1") and repo.is_session_revoked("a2")
    assert repo.is_session_revoked("b1") is False


def test_purge_expired_deletes_only_past_rows(repo, session, owner):
    now = _now()
    repo.store_session(owner.id, "gone-1", now - timedelta(hours=2))
    repo.store_session(owner.id, "gone-2", now - timedelta(minutes=1))
    repo.store_session(owner.id, "kept", now + timedelta(hours=1))

    assert repo.purge_expired(now=now) == 2
    remaining = session.execute(select(UserSession.jti)).scalars().all()
    assert remaining == ["kept"]
