from __future__ import annotations

import secrets
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Persisted refresh token.

    :ivar id: Random, unguessable identifier; also the bearer value.
    :ivar user_id: Owner account id.
    :ivar expiry_date: Absolute expiration (UTC).
    """

    id: str
    user_id: str
    expiry_date: datetime

    def is_expired(self, now: datetime) -> bool:
        """A record is usable only while its expiry is strictly after ``now``."""
        return not self.expiry_date > now


def new_refresh_token_id() -> str:
    """Generate a 128-bit random identifier rendered as 32 hex chars."""
    return secrets.token_hex(16)


class RefreshTokenStore(Protocol):
    """
    Keyed persistence for refresh token records with store-level expiry.

    ``delete`` MUST be atomic: when two callers race on the same id exactly
    one of them observes ``True``.
    """

    def insert(self, record: RefreshTokenRecord) -> None:
        """Persist ``record`` keyed by its id."""

    def get(self, token_id: str) -> RefreshTokenRecord | None:
        """Fetch a record by id (``None`` when absent)."""

    def delete(self, token_id: str) -> bool:
        """Remove a record. :returns: ``True`` if this call removed it."""

    def new_id(self) -> str:
        """Generate a new random refresh token identifier."""
        return new_refresh_token_id()


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-process refresh token store.

    Expired records are reclaimed by :meth:`purge_expired`, which runs on
    every insert; like a TTL monitor, it is not synchronous with expiry, so
    :meth:`get` may still return an expired record.

    .. note::
       Uses a threading lock to make ``delete`` atomic across threads.
    """

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._records: dict[str, RefreshTokenRecord] = {}
        self._lock = threading.Lock()
        self._clock = clock or (lambda: datetime.now(UTC))

    def insert(self, record: RefreshTokenRecord) -> None:
        self.purge_expired()
        with self._lock:
            self._records[record.id] = record

    def get(self, token_id: str) -> RefreshTokenRecord | None:
        with self._lock:
            return self._records.get(token_id)

    def delete(self, token_id: str) -> bool:
        with self._lock:
            return self._records.pop(token_id, None) is not None

    def new_id(self) -> str:
        return new_refresh_token_id()

    def purge_expired(self) -> int:
        """Drop records past their expiry. :returns: number removed."""
        now = self._clock()
        with self._lock:
            stale = [k for k, r in self._records.items() if r.is_expired(now)]
            for k in stale:
                del self._records[k]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
