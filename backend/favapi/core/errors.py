"""Centralized JSON error handling for the API.

Every handled failure is rendered as ``{"error": "<message>"}`` with the
matching HTTP status. Service errors are mapped by their :class:`ErrorKind`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from favapi.core.logger import ensure_request_id
from favapi.services._shared.errors import ErrorKind, ServiceError

log = logging.getLogger(__name__)

STATUS_BY_KIND: Mapping[ErrorKind, int] = {
    ErrorKind.VALIDATION: HTTPStatus.BAD_REQUEST,
    ErrorKind.AUTH: HTTPStatus.UNAUTHORIZED,
    ErrorKind.FORBIDDEN: HTTPStatus.FORBIDDEN,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.CONFLICT: HTTPStatus.CONFLICT,
    ErrorKind.UPSTREAM: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorKind.INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
}


def error_response(message: str, status: int) -> tuple[Response, int]:
    """Return the canonical ``{"error": message}`` response tuple."""
    return jsonify({"error": message}), int(status)


def flatten_messages(messages: Any, prefix: str = "") -> list[str]:
    """Flatten marshmallow's nested ``messages`` into ``field: text`` strings.

    >>> flatten_messages({"product_id": ["product_id must be positive"]})
    ['product_id must be positive']
    >>> flatten_messages({"email": ["Not a valid email address."]})
    ['email: Not a valid email address.']
    """
    if isinstance(messages, Mapping):
        out: list[str] = []
        for key, value in messages.items():
            name = f"{prefix}.{key}" if prefix else str(key)
            out.extend(flatten_messages(value, name))
        return out
    if isinstance(messages, list | tuple):
        out = []
        for item in messages:
            out.extend(flatten_messages(item, prefix))
        return out
    text = str(messages)
    # Custom validators already name the field in their message
    if not prefix or prefix == "_schema" or text.startswith(prefix):
        return [text]
    return [f"{prefix}: {text}"]


class APIError(Exception):
    """
    Represent an HTTP-level error raised directly from the web layer.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    """

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)


class BadRequest(APIError):
    """400 for malformed request bodies."""

    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST)


class Unauthorized(APIError):
    """401 when authentication fails."""

    def __init__(self, message: str = "Bearer token required") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED)


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - 5xx are logged at ERROR with ``exc_info``; 4xx as warnings.
    - Unexpected exceptions never leak internal details to clients.
    """

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        status = STATUS_BY_KIND.get(err.kind, HTTPStatus.INTERNAL_SERVER_ERROR)
        if status >= 500:
            log.error(
                "ServiceError: kind=%s status=%s msg=%s request_id=%s",
                err.kind.value,
                status,
                err.message,
                ensure_request_id(),
                exc_info=err,
            )
        else:
            log.warning(
                "ServiceError: kind=%s status=%s msg=%s request_id=%s",
                err.kind.value,
                status,
                err.message,
                ensure_request_id(),
            )
        return error_response(err.message, status)

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: status=%s msg=%s request_id=%s",
            err.status_code,
            err.message,
            ensure_request_id(),
        )
        return error_response(err.message, err.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        try:
            message = HTTPStatus(status).phrase
        except ValueError:
            message = "Error"
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        level = log.error if status >= 500 else log.warning
        level("HTTPException: status=%s detail=%s", status, message)
        return error_response(message, status)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        details = "; ".join(flatten_messages(err.messages)) or "Invalid request"
        log.warning("ValidationError: %s request_id=%s", details, ensure_request_id())
        return error_response(f"Bad request: {details}", HTTPStatus.BAD_REQUEST)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Race losers on unique constraints; do not leak the raw DB error
        log.error("IntegrityError: request_id=%s", ensure_request_id(), exc_info=True)
        return error_response("Resource conflict", HTTPStatus.CONFLICT)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("OperationalError: request_id=%s", ensure_request_id(), exc_info=True)
        return error_response("Service temporarily unavailable", HTTPStatus.SERVICE_UNAVAILABLE)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("Unhandled exception: request_id=%s", ensure_request_id(), exc_info=True)
        return error_response("Unexpected error", HTTPStatus.INTERNAL_SERVER_ERROR)
