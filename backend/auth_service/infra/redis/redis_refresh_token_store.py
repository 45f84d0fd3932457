# comments in English; reST docstrings
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import cast

import redis  # type: ignore[import-untyped]

from auth_service.services._shared.ports import (
    RefreshTokenRecord,
    RefreshTokenStore,
    new_refresh_token_id,
)


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store.

    Each record is a hash under ``rt:<id>`` with ``EXPIREAT`` set to the
    record's expiry, so Redis reclaims expired tokens on its own.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    # -------------------- helpers --------------------

    @staticmethod
    def _k(token_id: str) -> str:
        return f"rt:{token_id}"

    @staticmethod
    def _to_ts(dt: datetime) -> int:
        # Naive datetimes are labelled as UTC (no conversion)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return int(dt.timestamp())

    # -------------------- API ------------------------

    def insert(self, record: RefreshTokenRecord) -> None:
        """Write the hash and its expiry in one MULTI/EXEC block."""
        key = self._k(record.id)
        pipe = self.r.pipeline(transaction=True)
        pipe.hset(
            key,
            mapping={
                "user_id": record.user_id,
                "expiry_date": str(self._to_ts(record.expiry_date)),
            },
        )
        pipe.expireat(key, self._to_ts(record.expiry_date))
        pipe.execute()

    def get(self, token_id: str) -> RefreshTokenRecord | None:
        h = self.r.hgetall(self._k(token_id))
        if not h:
            return None

        def _b(s: bytes | None, default: str = "") -> str:
            return s.decode() if s is not None else default

        return RefreshTokenRecord(
            id=token_id,
            user_id=_b(h.get(b"user_id")),
            expiry_date=datetime.fromtimestamp(int(_b(h.get(b"expiry_date"), "0")), tz=UTC),
        )

    def delete(self, token_id: str) -> bool:
        # DEL is atomic: only one concurrent caller gets a count of 1
        removed = cast(int, self.r.delete(self._k(token_id)))
        return removed == 1

    def new_id(self) -> str:
        return new_refresh_token_id()
