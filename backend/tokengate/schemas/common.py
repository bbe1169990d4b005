"""Common Marshmallow fields and validators shared across payloads."""

from __future__ import annotations

import re
from typing import Any

from marshmallow import Schema, ValidationError, fields, pre_load, validate

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 100
NAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 255

_PASSWORD_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter."),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter."),
    (re.compile(r"\d"), "Password must contain at least one digit."),
)


def validate_password_strength(value: str) -> None:
    """Enforce length plus upper/lower/digit composition; report every miss."""
    errors: list[str] = []
    if not PASSWORD_MIN_LENGTH <= len(value) <= PASSWORD_MAX_LENGTH:
        errors.append(
            f"Password must be between {PASSWORD_MIN_LENGTH} and "
            f"{PASSWORD_MAX_LENGTH} characters."
        )
    errors.extend(message for pattern, message in _PASSWORD_RULES if not pattern.search(value))
    if errors:
        raise ValidationError(errors)


def email_field(**kwargs: Any) -> fields.Email:
    return fields.Email(validate=validate.Length(max=EMAIL_MAX_LENGTH), **kwargs)


def name_field(**kwargs: Any) -> fields.String:
    return fields.String(validate=validate.Length(min=1, max=NAME_MAX_LENGTH), **kwargs)


def password_field(**kwargs: Any) -> fields.String:
    return fields.String(validate=validate_password_strength, **kwargs)


class TrimmedSchema(Schema):
    """Strip surrounding whitespace from string inputs before validation.

    Passwords are left untouched.
    """

    _untrimmed: tuple[str, ...] = (
        "password",
        "current_password",
        "new_password",
        "confirm_password",
    )

    @pre_load
    def strip_strings(self, data: Any, **_: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            key: value.strip() if isinstance(value, str) and key not in self._untrimmed else value
            for key, value in data.items()
        }
