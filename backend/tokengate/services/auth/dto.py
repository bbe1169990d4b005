# tokengate/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from tokengate.services._shared.dto import SafeUserOut

DEFAULT_ACCESS_EXPIRES = timedelta(minutes=15)
DEFAULT_REFRESH_EXPIRES = timedelta(days=7)

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email as typed (trimmed by the schema).
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Opaque refresh token id.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param refresh_token: Opaque refresh token id; ``None`` makes logout a no-op.
    :type refresh_token: str | None
    """

    refresh_token: str | None = None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Signed access JWT.
    :type access_token: str
    :param refresh_token: Opaque refresh token id.
    :type refresh_token: str
    :param expires_in: Access token lifetime in seconds.
    :type expires_in: int
    :param token_type: Authorization scheme for the access token.
    :type token_type: str
    """

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "Bearer"


@dataclass(frozen=True, slots=True)
class AuthResultOut:
    """
    Output DTO for login and registration: safe user view plus token pair.

    :param user: User view without the password hash.
    :type user: SafeUserOut
    :param tokens: Freshly issued pair.
    :type tokens: TokenPairOut
    """

    user: SafeUserOut
    tokens: TokenPairOut


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    """

    access_expires: timedelta = DEFAULT_ACCESS_EXPIRES
    refresh_expires: timedelta = DEFAULT_REFRESH_EXPIRES

    @classmethod
    def from_mapping(cls, config) -> AuthTokenConfig:
        """Build from a Flask config mapping."""
        return cls(
            access_expires=config.get("JWT_ACCESS_TOKEN_EXPIRES", DEFAULT_ACCESS_EXPIRES),
            refresh_expires=config.get("REFRESH_TOKEN_EXPIRES", DEFAULT_REFRESH_EXPIRES),
        )
