"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, g

from favapi.api.deps import (
    bearer_token,
    container,
    current_identity,
    json_response,
    load_json,
    require_auth,
    timing,
)
from favapi.core.errors import BadRequest, Unauthorized
from favapi.schemas import AuthUserSchema, LoginSchema, TokenResponseSchema
from favapi.services._shared.errors import AuthError
from favapi.services.auth.dto import LoginIn, LoginOut

bp = Blueprint("auth", __name__)

login_schema = LoginSchema()
user_schema = AuthUserSchema()
token_schema = TokenResponseSchema()

LOGOUT_FAILED = "Failed to logout. Token may be invalid or already revoked."


def _token_body(out: LoginOut, *, with_user: bool) -> dict:
    data = token_schema.dump(out.token)
    if with_user:
        data["user"] = user_schema.dump(out.user)
    return {"data": data}


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue an access token."""

    payload = login_schema.load(load_json())
    out = container().auth_service.login(LoginIn(email=payload["email"], password=payload["password"]))
    return json_response(_token_body(out, with_user=True))


@bp.post("/refresh")
@timing
def refresh():
    """Exchange the presented token for a new one, revoking the old session."""

    token = bearer_token()
    if token is None:
        raise Unauthorized()
    out = container().auth_service.refresh_token(token)
    if out is None:
        raise AuthError()
    return json_response(_token_body(out, with_user=False))


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Revoke the session behind the presented token."""

    if not container().auth_service.logout(g.token):
        raise BadRequest(LOGOUT_FAILED)
    return json_response({"message": "Logged out successfully"})


@bp.get("/verify")
@require_auth
@timing
def verify():
    """Return the identity carried by a valid token."""

    return json_response(
        {"data": {"user": user_schema.dump(current_identity()), "authenticated": True}}
    )
