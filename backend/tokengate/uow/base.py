"""
Transaction boundary contract for credential operations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tokengate.repositories import RefreshTokenRepository, UserRepository


class UnitOfWork(ABC):
    """
    One transaction spanning the account and refresh-token tables.

    A credential operation (register, login, rotate, revoke-all) either
    persists every row it touched or none of them. Implementations expose
    both repositories bound to the same transaction.

    Attributes
    ----------
    users : UserRepository
        Account rows.
    refresh_tokens : RefreshTokenRepository
        Issued refresh tokens.
    """

    users: UserRepository
    refresh_tokens: RefreshTokenRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None:
        """Persist on clean exit; discard everything when ``exc`` is set."""

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
