"""User resource schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, post_load, validate, validates_schema

from tokengate.models.user import UserRole
from tokengate.schemas.common import TrimmedSchema, email_field, name_field, password_field
from tokengate.services.identity.dto import AccessUpdateIn, PasswordChangeIn, ProfileUpdateIn


class UserSchema(Schema):
    """Safe representation of a user; never carries the password hash."""

    id = fields.String(required=True)
    email = fields.Email(required=True)
    first_name = fields.String(allow_none=True)
    last_name = fields.String(allow_none=True)
    role = fields.String(required=True)
    is_active = fields.Boolean(required=True)
    last_login = fields.DateTime(allow_none=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)


class ProfileUpdateSchema(TrimmedSchema):
    """Partial profile update; at least one field must be present."""

    first_name = name_field()
    last_name = name_field()
    email = email_field()

    @validates_schema
    def require_one_field(self, data: dict[str, Any], **_: Any) -> None:
        if not data:
            raise ValidationError("At least one field must be provided.", "_schema")

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> ProfileUpdateIn:
        return ProfileUpdateIn(**data)


class PasswordChangeSchema(TrimmedSchema):
    """Password change payload; the confirmation must match the new password."""

    current_password = fields.String(required=True, validate=validate.Length(min=1))
    new_password = password_field(required=True)
    confirm_password = fields.String(required=True)

    @validates_schema
    def passwords_match(self, data: dict[str, Any], **_: Any) -> None:
        if data.get("new_password") != data.get("confirm_password"):
            raise ValidationError("Passwords do not match.", "confirm_password")

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> PasswordChangeIn:
        return PasswordChangeIn(
            current_password=data["current_password"],
            new_password=data["new_password"],
        )


class AccessUpdateSchema(Schema):
    """Administrative role / active-flag change."""

    role = fields.String(validate=validate.OneOf([r.value for r in UserRole]))
    is_active = fields.Boolean()

    @validates_schema
    def require_one_field(self, data: dict[str, Any], **_: Any) -> None:
        if not data:
            raise ValidationError("At least one field must be provided.", "_schema")

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> AccessUpdateIn:
        return AccessUpdateIn(**data)
