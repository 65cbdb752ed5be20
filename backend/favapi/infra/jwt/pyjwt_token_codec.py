from __future__ import annotations

from dataclasses import dataclass
from typing import Any, cast

import jwt

from favapi.services._shared.ports.token_codec import DecodeError, TokenCodec

REQUIRED_CLAIMS = ("iss", "aud", "iat", "exp", "jti", "sub")


@dataclass(slots=True)
class PyJWTTokenCodec(TokenCodec):
    """
    HS256 token codec built on PyJWT.

    Verification checks signature, ``exp``, ``iss`` and ``aud``, and requires
    every claim in :data:`REQUIRED_CLAIMS`. Every verification failure comes
    back as a :class:`DecodeError` value; nothing raises.

    :param issuer: Expected ``iss`` (the service base URL).
    :param audience: Expected ``aud``.
    :param algorithm: Signing algorithm; only symmetric HMAC is supported.
    :param leeway: Clock skew tolerance in seconds when checking ``exp``/``iat``.
    """

    issuer: str
    audience: str
    algorithm: str = "HS256"
    leeway: int = 0

    def encode(self, claims: dict[str, Any], secret: str) -> str:
        return cast(str, jwt.encode(claims, secret, algorithm=self.algorithm))

    def decode(self, token: str, secret: str) -> dict[str, Any] | DecodeError:
        if not isinstance(token, str) or not token:
            return DecodeError("malformed")
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                leeway=self.leeway,
                options={"require": list(REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError:
            return DecodeError("expired")
        except jwt.InvalidSignatureError:
            return DecodeError("signature")
        except jwt.InvalidAudienceError:
            return DecodeError("audience")
        except jwt.InvalidIssuerError:
            return DecodeError("issuer")
        except jwt.PyJWTError:
            return DecodeError("malformed")
        return cast(dict[str, Any], claims)
