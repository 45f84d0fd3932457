"""
Unit tests for the refresh token stores.

The Redis store runs against fakeredis; the in-process store uses the shared
frozen clock. Both must honour the single-use ``delete`` contract.
"""

from __future__ import annotations

import re
import threading
from datetime import UTC, datetime, timedelta

import fakeredis
import pytest

from auth_service.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from auth_service.services._shared.ports import (
    InMemoryRefreshTokenStore,
    RefreshTokenRecord,
    new_refresh_token_id,
)


def _now() -> datetime:
    """Return a timezone-aware UTC "now" truncated to whole seconds."""
    return datetime.now(UTC).replace(microsecond=0)


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def redis_store(fake_redis):
    return RedisRefreshTokenStore(r=fake_redis)


@pytest.fixture(params=["memory", "redis"])
def store(request, refresh_store, fake_redis):
    """Run contract tests against both implementations."""
    if request.param == "memory":
        return refresh_store
    return RedisRefreshTokenStore(r=fake_redis)


def _record(store, *, user_id: str = "user-1", expiry: datetime | None = None) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        id=store.new_id(),
        user_id=user_id,
        expiry_date=expiry or _now() + timedelta(minutes=15),
    )


# ------------------------------ Contract ---------------------------------- #


def test_new_ids_are_32_hex_and_unique(store):
    ids = {store.new_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(re.fullmatch(r"[0-9a-f]{32}", i) for i in ids)


def test_insert_then_get(store):
    record = _record(store)
    store.insert(record)

    fetched = store.get(record.id)
    assert fetched == record


def test_get_unknown_returns_none(store):
    assert store.get(new_refresh_token_id()) is None


def test_delete_is_single_use(store):
    record = _record(store)
    store.insert(record)

    assert store.delete(record.id) is True
    assert store.delete(record.id) is False
    assert store.get(record.id) is None


def test_concurrent_delete_has_exactly_one_winner(store):
    record = _record(store)
    store.insert(record)
    barrier = threading.Barrier(8)
    outcomes: list[bool] = []
    lock = threading.Lock()

    def consume():
        barrier.wait()
        result = store.delete(record.id)
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=consume) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count(True) == 1
    assert outcomes.count(False) == 7


def test_record_expiry_is_strict():
    now = _now()
    record = RefreshTokenRecord(id="x", user_id="u", expiry_date=now)
    assert record.is_expired(now)
    assert not record.is_expired(now - timedelta(seconds=1))


# ------------------------------ Redis -------------------------------------- #


def test_redis_key_expires_at_record_expiry(redis_store, fake_redis):
    expiry = _now() + timedelta(minutes=15)
    record = _record(redis_store, expiry=expiry)
    redis_store.insert(record)

    ttl = fake_redis.ttl(f"rt:{record.id}")
    assert 0 < ttl <= 15 * 60


def test_redis_naive_expiry_is_treated_as_utc(redis_store):
    expiry = (_now() + timedelta(minutes=1)).replace(tzinfo=None)
    record = RefreshTokenRecord(id=redis_store.new_id(), user_id="u", expiry_date=expiry)
    redis_store.insert(record)

    assert redis_store.get(record.id).expiry_date == expiry.replace(tzinfo=UTC)


# ------------------------------ In-memory ---------------------------------- #


def test_memory_get_does_not_purge_expired(refresh_store, clock):
    record = RefreshTokenRecord(
        id=refresh_store.new_id(), user_id="u", expiry_date=clock.now + timedelta(minutes=1)
    )
    refresh_store.insert(record)
    clock.advance(minutes=2)

    assert refresh_store.get(record.id) == record


def test_memory_insert_purges_expired(refresh_store, clock):
    stale = RefreshTokenRecord(id="stale", user_id="u", expiry_date=clock.now + timedelta(seconds=5))
    refresh_store.insert(stale)
    clock.advance(seconds=5)

    fresh = RefreshTokenRecord(id="fresh", user_id="u", expiry_date=clock.now + timedelta(minutes=1))
    refresh_store.insert(fresh)

    assert refresh_store.get("stale") is None
    assert len(refresh_store) == 1


def test_memory_purge_expired_reports_count(refresh_store, clock):
    for i in range(3):
        refresh_store.insert(
            RefreshTokenRecord(id=f"r{i}", user_id="u", expiry_date=clock.now + timedelta(seconds=i + 1))
        )
    clock.advance(seconds=2)

    assert refresh_store.purge_expired() == 2
    assert len(refresh_store) == 1


def test_memory_store_default_clock_is_utc():
    store = InMemoryRefreshTokenStore()
    record = RefreshTokenRecord(id="x", user_id="u", expiry_date=_now() - timedelta(seconds=1))
    store.insert(record)

    assert store.purge_expired() == 1


def test_memory_len_waits_for_the_store_lock(refresh_store, clock):
    refresh_store.insert(_record(refresh_store, expiry=clock.now + timedelta(minutes=15)))
    sizes: list[int] = []
    reader = threading.Thread(target=lambda: sizes.append(len(refresh_store)))

    with refresh_store._lock:
        reader.start()
        reader.join(timeout=0.2)
        assert reader.is_alive()
        assert sizes == []

    reader.join(timeout=5)
    assert sizes == [1]
