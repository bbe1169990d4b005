"""
tokengate.services._shared.ports
================================

*Ports* (hexagonal interfaces) for the credential infrastructure.

Modules
-------
- :mod:`token_provider`:
    Defines :class:`~.TokenProvider` — abstraction for signing and decoding
    access tokens, plus :class:`~.StubTokenProvider` for unit tests.

- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher` — salted one-way hashing with
    constant-time verification.

Concrete adapters live under ``tokengate.infra``.
"""

from __future__ import annotations

from .password_hasher import PasswordHasher
from .token_provider import StubTokenProvider, TokenProvider

__all__ = [
    "PasswordHasher",
    "StubTokenProvider",
    "TokenProvider",
]
