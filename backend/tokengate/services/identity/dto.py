"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass

from tokengate.services._shared.dto import SafeUserOut
from tokengate.services.auth.dto import TokenPairOut

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for user registration.

    :param email: Login email (trimmed, case preserved).
    :type email: str
    :param password: Raw password to be hashed by the service.
    :type password: str
    :param first_name: Optional first name.
    :type first_name: str | None
    :param last_name: Optional last name.
    :type last_name: str | None
    """

    email: str
    password: str
    first_name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """
    Input DTO for updating profile fields.

    ``None`` means "leave unchanged".

    :param first_name: Optional new first name.
    :type first_name: str | None
    :param last_name: Optional new last name.
    :type last_name: str | None
    :param email: Optional new email.
    :type email: str | None
    """

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None

    def changes(self) -> dict[str, str]:
        return {
            k: v
            for k, v in {
                "first_name": self.first_name,
                "last_name": self.last_name,
                "email": self.email,
            }.items()
            if v is not None
        }


@dataclass(frozen=True, slots=True)
class PasswordChangeIn:
    """
    Input DTO for changing a password.

    :param current_password: Password currently stored.
    :type current_password: str
    :param new_password: Replacement password (policy already validated).
    :type new_password: str
    """

    current_password: str
    new_password: str


@dataclass(frozen=True, slots=True)
class AccessUpdateIn:
    """
    Input DTO for administrative access changes.

    :param role: Optional new role (``user`` or ``admin``).
    :type role: str | None
    :param is_active: Optional new active flag.
    :type is_active: bool | None
    """

    role: str | None = None
    is_active: bool | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class RegistrationOut:
    """
    Output DTO for registration.

    :param user: Safe view of the new account.
    :type user: SafeUserOut
    :param tokens: Token pair issued in the registration transaction, if any.
    :type tokens: TokenPairOut | None
    """

    user: SafeUserOut
    tokens: TokenPairOut | None = None
