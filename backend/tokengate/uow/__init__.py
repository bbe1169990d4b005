"""Unit of Work abstractions, concrete implementations and the store handle.

Services receive a :class:`CredentialStore` and open read-write or read-only
units of work from it; repositories inside a unit share one session.
"""

from .base import UnitOfWork
from .sqlalchemy_uow import (
    CredentialStore,
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

__all__ = [
    "CredentialStore",
    "UnitOfWork",
    "SQLAlchemyUnitOfWork",
    "SQLAlchemyReadOnlyUnitOfWork",
]
