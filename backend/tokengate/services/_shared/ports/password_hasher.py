from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """Port for one-way salted password hashing."""

    def hash(self, plaintext: str) -> str:
        """Return a salted hash; two calls with the same input differ."""
        ...

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Constant-time check; returns ``False`` for malformed hashes."""
        ...
