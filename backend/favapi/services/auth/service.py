# favapi/services/auth/service.py
from __future__ import annotations

import logging
import secrets
from datetime import UTC, datetime
from functools import lru_cache
from typing import Any

from werkzeug.security import check_password_hash, generate_password_hash

from favapi.services._shared.base import BaseService
from favapi.services._shared.errors import AuthError
from favapi.services._shared.ports.token_codec import DecodeError, TokenCodec
from favapi.services.auth.dto import (
    AuthIdentity,
    AuthTokenConfig,
    IssuedToken,
    LoginIn,
    LoginOut,
)
from favapi.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return generate_password_hash(secrets.token_hex(16))


def new_jti() -> str:
    """Return a fresh token id: 128 random bits, hex-encoded."""
    return secrets.token_hex(16)


class AuthService(BaseService):
    """
    Session lifecycle: credential check, issuance, validation, refresh, logout.

    Tokens are stateless signed claims, but every token is also recorded in the
    session store by ``jti``. A token is valid only while both agree: the
    signature and ``exp`` verify AND the store holds a live, unrevoked row.

    Validation failures are never distinguished to callers; every flavour of
    "bad token" comes back as ``None``/``False``.

    Refresh always revokes the presented token's session once the new one is
    stored.
    """

    def __init__(self, *, token_codec: TokenCodec, token_cfg: AuthTokenConfig, **kwargs: Any):
        """
        :param token_codec: Adapter that signs and verifies tokens.
        :param token_cfg: Secret, issuer, audience and lifetime.
        """
        super().__init__(**kwargs)
        self.codec = token_codec
        self.cfg = token_cfg

    # ------------------------------------------------------------------ #
    # Credentials
    # ------------------------------------------------------------------ #

    def authenticate_user(self, email: str, password: str) -> AuthIdentity | None:
        """
        Verify credentials with a slow hash comparison.

        Unknown emails still pay for one hash check so response timing does
        not reveal which emails exist.

        :returns: The identity, or ``None`` on any failure.
        """
        with self.ro_uow() as uow:
            client = uow.clients.get_by_email(email or "")
            if client is None:
                check_password_hash(_dummy_hash(), password or "")
                return None
            if not client.verify_password(password or ""):
                return None
            return AuthIdentity(id=client.id, name=client.name, email=client.email)

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Authenticate and issue a token.

        :raises AuthError: With a single message for every credential failure.
        """
        identity = self.authenticate_user(dto.email, dto.password)
        if identity is None:
            log.info("auth.login_failed")
            raise AuthError(INVALID_CREDENTIALS)
        token = self.generate_jwt(identity)
        log.info("auth.login_succeeded", extra={"client_id": identity.id})
        return LoginOut(token=token, user=identity)

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def _issue(self, uow: SQLAlchemyUnitOfWork, identity: AuthIdentity) -> IssuedToken:
        now = datetime.now(UTC).replace(microsecond=0)
        expires_at = now + self.cfg.access_expires
        jti = new_jti()
        uow.sessions.store_session(identity.id, jti, expires_at)
        claims: dict[str, Any] = {
            "iss": self.cfg.issuer,
            "aud": self.cfg.audience,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": jti,
            "sub": str(identity.id),
            "user": identity.to_claim(),
        }
        token = self.codec.encode(claims, self.cfg.secret)
        return IssuedToken(
            access_token=token,
            jti=jti,
            expires_in=int(self.cfg.access_expires.total_seconds()),
            expires_at=expires_at,
        )

    def generate_jwt(self, identity: AuthIdentity) -> IssuedToken:
        """
        Mint a new token id, persist its session, and sign the token.

        Each call creates exactly one new session row.
        """
        with self.rw_uow() as uow:
            return self._issue(uow, identity)

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #

    def _decode(self, token: str) -> dict[str, Any] | None:
        claims = self.codec.decode(token, self.cfg.secret)
        if isinstance(claims, DecodeError):
            log.debug("auth.decode_failed reason=%s", claims.reason)
            return None
        return claims

    def validate_jwt(self, token: str) -> AuthIdentity | None:
        """
        Decode the token and check the session store.

        Fails closed: decode errors, a missing or revoked session, and a
        malformed ``user`` claim all return ``None``.
        """
        claims = self._decode(token)
        if claims is None:
            return None
        identity = AuthIdentity.from_claim(claims.get("user"))
        jti = claims.get("jti")
        if identity is None or not isinstance(jti, str) or str(identity.id) != claims.get("sub"):
            return None
        with self.ro_uow() as uow:
            if uow.sessions.is_session_revoked(jti):
                return None
        return identity

    # ------------------------------------------------------------------ #
    # Refresh / logout
    # ------------------------------------------------------------------ #

    def refresh_token(self, token: str) -> LoginOut | None:
        """
        Exchange a valid token for a new one and revoke the old session.

        The identity is re-read from the store so renamed clients get fresh
        claims. Returns ``None`` when the token is invalid, the client is gone,
        or another refresh already revoked the old session.
        """
        identity = self.validate_jwt(token)
        if identity is None:
            return None
        claims = self._decode(token) or {}
        old_jti = str(claims.get("jti"))

        with self.rw_uow() as uow:
            client = uow.clients.get(identity.id)
            if client is None:
                return None
            # Only the caller that stamps the old session may mint a new one
            if not uow.sessions.revoke_token(old_jti):
                log.info("auth.refresh_lost_race", extra={"client_id": client.id})
                return None
            fresh = AuthIdentity(id=client.id, name=client.name, email=client.email)
            issued = self._issue(uow, fresh)
        log.info("auth.token_refreshed", extra={"client_id": fresh.id})
        return LoginOut(token=issued, user=fresh)

    def logout(self, token: str) -> bool:
        """
        Revoke the session tied to the token's ``jti``.

        :returns: ``False`` when the token cannot be decoded, carries no
            ``jti``, or no live session was revoked.
        """
        claims = self._decode(token)
        if claims is None:
            return False
        jti = claims.get("jti")
        if not isinstance(jti, str) or not jti:
            return False
        with self.rw_uow() as uow:
            revoked = uow.sessions.revoke_token(jti)
        if revoked:
            log.info("auth.logout", extra={"client_id": claims.get("sub")})
        return revoked

    # ------------------------------------------------------------------ #
    # Maintenance
    # ------------------------------------------------------------------ #

    def revoke_all_sessions(self, client_id: int) -> int:
        """Revoke every live session of ``client_id``; returns how many."""
        with self.rw_uow() as uow:
            count = uow.sessions.revoke_all_for_client(client_id)
        log.info("auth.sessions_revoked", extra={"client_id": client_id})
        return count

    def purge_expired_sessions(self, *, now: datetime | None = None) -> int:
        """Delete session rows past their expiry; returns how many."""
        with self.rw_uow() as uow:
            return uow.sessions.purge_expired(now=now)
