"""Persistence-only repository base for SQLAlchemy 2.x.

Repositories build statements, never commit and never roll back: the unit of
work that handed them their session owns the transaction. Values always
travel as bound parameters.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import select
from sqlalchemy.orm import Session

E = TypeVar("E")  # mapped entity


class BaseRepository(Generic[E]):
    """Primary-key access and whitelisted updates for one mapped class.

    Subclasses set ``model`` and override :meth:`_updatable_fields` to allow
    :meth:`update`; with an empty whitelist every update is refused, so
    columns such as ``role`` or ``password_hash`` cannot be mass-assigned.
    """

    model: type[E]

    def __init__(self, session: Session) -> None:
        """
        :param session: Session of the enclosing unit of work.
        :type session: :class:`sqlalchemy.orm.Session`
        """
        self.session = session

    def _updatable_fields(self) -> set[str]:
        return set()

    def _checked_updates(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``fields`` unchanged if every key is whitelisted.

        :raises ValueError: On any key outside :meth:`_updatable_fields`.
        """
        rejected = sorted(set(fields) - self._updatable_fields())
        if rejected:
            raise ValueError(f"Unknown or non-updatable fields: {rejected}")
        return dict(fields)

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so constraint violations surface here."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Load by primary key; ``None`` when absent."""
        stmt = select(self.model).where(self.model.id == entity_id)  # type: ignore[attr-defined]
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def get_for_update(self, entity_id: Any) -> E | None:
        """Load by primary key holding a row lock (``FOR UPDATE`` where supported)."""
        stmt = (
            select(self.model)
            .where(self.model.id == entity_id)  # type: ignore[attr-defined]
            .with_for_update()
        )
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def flush(self) -> None:
        self.session.flush()

    def update(self, instance: E, **fields: Any) -> E:
        """Assign whitelisted ``fields`` through ``setattr`` and flush.

        ``setattr`` keeps ``@validates`` hooks on the model in play.

        :raises ValueError: If a key is not whitelisted.
        """
        for key, value in self._checked_updates(fields).items():
            setattr(instance, key, value)
        self.flush()
        return instance
