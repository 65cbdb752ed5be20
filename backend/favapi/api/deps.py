"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from favapi.core.container import AppContainer, get_container
from favapi.core.errors import BadRequest, Unauthorized
from favapi.services._shared.errors import AuthError
from favapi.services.auth.dto import AuthIdentity

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "Bearer "


def container() -> AppContainer:
    """Return the dependency container of the running app."""

    return get_container()


def bearer_token() -> str | None:
    """Extract the token from ``Authorization: Bearer <token>``, if well formed."""

    header = request.headers.get("Authorization", "")
    if not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :].strip()
    return token or None


def require_auth(func: F) -> F:
    """Ensure the request carries a valid, unrevoked access token.

    On success the identity is stored on ``g.auth`` and the raw token on
    ``g.token``. A missing or malformed header and an invalid token are both
    401, with different messages.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = bearer_token()
        if token is None:
            raise Unauthorized()
        identity = container().auth_service.validate_jwt(token)
        if identity is None:
            raise AuthError()
        g.auth = identity
        g.token = token
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_identity() -> AuthIdentity:
    """Return the identity attached by :func:`require_auth`."""

    identity = g.get("auth")
    if identity is None:
        raise Unauthorized()
    return identity


def load_json() -> dict[str, Any]:
    """Return the JSON object body or raise ``400 Request body is empty``."""

    payload = request.get_json(silent=True)
    if not payload:
        raise BadRequest("Request body is empty")
    if not isinstance(payload, dict):
        raise BadRequest("Request body must be a JSON object")
    return payload


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
