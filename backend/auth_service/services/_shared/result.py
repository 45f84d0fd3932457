"""
Explicit success/failure values for service calls.

A service operation either returns a value or raises a :class:`ServiceError`;
:func:`capture` folds both into an :data:`Outcome` so callers branch on the
failure ``kind`` instead of catching exceptions.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from auth_service.services._shared.errors import ErrorKind, ServiceError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying the operation's return value."""

    value: T


@dataclass(frozen=True, slots=True)
class Failure:
    """Failed outcome: one error kind and one human-readable reason."""

    kind: ErrorKind
    reason: str

    @classmethod
    def from_error(cls, exc: ServiceError) -> Failure:
        return cls(kind=exc.kind, reason=exc.reason)


Outcome = Ok[T] | Failure


def capture(fn: Callable[..., T], *args: Any, **kwargs: Any) -> Ok[T] | Failure:
    """
    Run ``fn`` and wrap its result.

    Only :class:`ServiceError` is folded into a :class:`Failure`; anything
    else propagates.
    """
    try:
        return Ok(fn(*args, **kwargs))
    except ServiceError as exc:
        return Failure.from_error(exc)
