from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class DecodeError:
    """
    Typed failure returned by :meth:`TokenCodec.decode`.

    :param reason: Short machine-oriented cause (``expired``, ``signature``,
        ``audience``, ``issuer``, ``malformed``). For logs only; callers at the
        HTTP boundary must not reveal it.
    """

    reason: str


class TokenCodec(Protocol):
    """Port for producing and verifying compact signed session tokens."""

    def encode(self, claims: dict[str, Any], secret: str) -> str: ...

    def decode(self, token: str, secret: str) -> dict[str, Any] | DecodeError: ...
