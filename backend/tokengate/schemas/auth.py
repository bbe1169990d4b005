"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, post_load, validate

from tokengate.schemas.common import TrimmedSchema, email_field, name_field, password_field
from tokengate.services.auth.dto import LoginIn, RefreshIn
from tokengate.services.identity.dto import RegisterIn


class RegisterSchema(TrimmedSchema):
    """Input payload for account registration."""

    email = email_field(required=True)
    password = password_field(required=True)
    first_name = name_field(load_default=None)
    last_name = name_field(load_default=None)

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> RegisterIn:
        return RegisterIn(**data)


class LoginSchema(TrimmedSchema):
    """Input payload for authenticating a user."""

    email = email_field(required=True)
    password = fields.String(required=True, validate=validate.Length(min=1))

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> LoginIn:
        return LoginIn(**data)


class RefreshSchema(TrimmedSchema):
    """Input payload for refreshing the token pair."""

    refresh_token = fields.String(
        required=True,
        validate=validate.Length(min=1),
        error_messages={"required": "Refresh token is required."},
    )

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> RefreshIn:
        return RefreshIn(**data)


class TokenPairSchema(Schema):
    """Response payload containing an access/refresh token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.String(dump_default="Bearer")
    expires_in = fields.Integer(required=True)
