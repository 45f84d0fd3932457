"""Factory Boy base bound to the per-test SAVEPOINT session."""

from __future__ import annotations

import factory

_bound_session = None


def bind_session(session) -> None:
    """Make factories persist into ``session`` (set by the autouse fixture)."""
    global _bound_session
    _bound_session = session


def bound_session():
    if _bound_session is None:
        raise RuntimeError("No session bound; request the 'session' fixture first.")
    return _bound_session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Flush-only persistence so rows vanish with the test's SAVEPOINT."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = bound_session
        sqlalchemy_session_persistence = "flush"
