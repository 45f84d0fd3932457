"""Tiny helpers shared across test modules."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


class FrozenClock:
    """Controllable clock returning aware UTC instants.

    Parameters
    ----------
    start: datetime, optional
        Initial instant. Defaults to a fixed date truncated to whole seconds.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2030, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        """Move the clock forward by ``timedelta(**kwargs)``."""
        self.now += timedelta(**kwargs)
