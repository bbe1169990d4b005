"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import LoginSchema, RefreshSchema, RegisterSchema, TokenPairSchema
from .user import AccessUpdateSchema, PasswordChangeSchema, ProfileUpdateSchema, UserSchema

__all__ = [
    "AccessUpdateSchema",
    "LoginSchema",
    "PasswordChangeSchema",
    "ProfileUpdateSchema",
    "RefreshSchema",
    "RegisterSchema",
    "TokenPairSchema",
    "UserSchema",
]
