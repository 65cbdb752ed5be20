"""Client resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

MIN_PASSWORD_LENGTH = 6


class ClientCreateSchema(Schema):
    """Signup payload."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=255))
    email = fields.Email(required=True, validate=validate.Length(max=255))
    password = fields.String(
        required=True,
        load_only=True,
        validate=validate.Length(
            min=MIN_PASSWORD_LENGTH,
            error=f"password must be at least {MIN_PASSWORD_LENGTH} characters",
        ),
    )


class ClientUpdateSchema(Schema):
    """Partial update payload; absent fields stay unchanged."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(validate=validate.Length(min=1, max=255))
    email = fields.Email(validate=validate.Length(max=255))
    password = fields.String(
        load_only=True,
        validate=validate.Length(
            min=MIN_PASSWORD_LENGTH,
            error=f"password must be at least {MIN_PASSWORD_LENGTH} characters",
        ),
    )


class ClientSchema(Schema):
    """Public representation of a client. Never includes the password."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    email = fields.Email(required=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)
