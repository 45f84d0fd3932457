"""Generic repository base for SQLAlchemy 2.x.

Repositories here are persistence-only: they look rows up by key, stage
inserts and flush so the store assigns identifiers. They never commit or
roll back; the Unit of Work owns the transaction.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, cast

from sqlalchemy import select
from sqlalchemy.orm import Session

from auth_service.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Persistence-only repository for a single mapped class.

    Subclasses set ``model`` to a mapped class that exposes an ``id``
    primary key.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Bind the repository to ``session``.

        Without an explicit session the Flask-scoped ``db.session`` is used.

        :param session: Session shared across the Unit of Work scope.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Active SQLAlchemy session for this repository."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so its primary key is materialized.

        :param instance: New entity instance.
        :returns: The same instance after ``flush()``.
        :raises sqlalchemy.exc.IntegrityError: When a constraint rejects the row.
        """
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Return the entity whose ``id`` equals ``entity_id``, or ``None``."""
        stmt = select(self.model).where(self.model.id == entity_id)  # type: ignore[attr-defined]
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def flush(self) -> None:
        self.session.flush()
