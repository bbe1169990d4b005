"""Service layer public API.

Re-exports
----------
- Base primitives (from ``tokengate.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Shared DTOs (from ``tokengate.services._shared.dto``)
    * :class:`Identity`
    * :class:`SafeUserOut`

- Authentication (from ``tokengate.services.auth``)
    * :class:`AuthService`, :class:`TokenIssuer`
    * DTOs: :class:`LoginIn`, :class:`RefreshIn`, :class:`LogoutIn`,
      :class:`TokenPairOut`, :class:`AuthResultOut`, :class:`AuthTokenConfig`

- Identity (from ``tokengate.services.identity``)
    * :class:`IdentityService`
    * DTOs: :class:`RegisterIn`, :class:`ProfileUpdateIn`,
      :class:`PasswordChangeIn`, :class:`AccessUpdateIn`, :class:`RegistrationOut`
"""

from __future__ import annotations

# Base primitives (service base + request-scoped context)
from ._shared.base import BaseService, ServiceContext
from ._shared.dto import Identity, SafeUserOut

# Authentication service + DTOs
from .auth.dto import AuthResultOut, AuthTokenConfig, LoginIn, LogoutIn, RefreshIn, TokenPairOut
from .auth.service import AuthService
from .auth.tokens import TokenIssuer

# Identity service + DTOs
from .identity.dto import (
    AccessUpdateIn,
    PasswordChangeIn,
    ProfileUpdateIn,
    RegisterIn,
    RegistrationOut,
)
from .identity.service import IdentityService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    "Identity",
    "SafeUserOut",
    # Auth
    "AuthService",
    "TokenIssuer",
    "LoginIn",
    "RefreshIn",
    "LogoutIn",
    "TokenPairOut",
    "AuthResultOut",
    "AuthTokenConfig",
    # Identity
    "IdentityService",
    "RegisterIn",
    "ProfileUpdateIn",
    "PasswordChangeIn",
    "AccessUpdateIn",
    "RegistrationOut",
]
