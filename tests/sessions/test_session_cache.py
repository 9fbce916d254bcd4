from __future__ import annotations

from datetime import timedelta

import pytest

from src.hr_attendance.hr_attendance.sessions.cache import SessionCache
from src.hr_attendance.hr_attendance.users.model import User

ALICE = User(user_id=1, full_name="Alice", username="alice")
BOB = User(user_id=2, full_name="Bob", username="bob")


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, minutes):
        self.now += minutes * 60


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return SessionCache(ttl=timedelta(minutes=15), cleanup_interval=timedelta(minutes=5), clock=clock)


def test_get_returns_cached_user(cache):
    cache.set("s1", ALICE)

    assert cache.get("s1") == ALICE
    assert "s1" in cache
    assert cache.get("missing") is None


def test_entry_expires_after_ttl(cache, clock):
    cache.set("s1", ALICE)
    clock.advance(15)

    assert cache.get("s1") is None
    assert len(cache) == 0


def test_access_slides_the_expiry(cache, clock):
    cache.set("s1", ALICE)
    clock.advance(10)
    assert cache.get("s1") == ALICE

    clock.advance(10)
    assert cache.get("s1") == ALICE


def test_set_replaces_existing_entry(cache):
    cache.set("s1", ALICE)
    cache.set("s1", BOB)

    assert cache.get("s1") == BOB


def test_remove_and_clear(cache):
    cache.set("s1", ALICE)
    cache.set("s2", BOB)

    cache.remove("s1")
    cache.remove("never-there")
    assert cache.get("s1") is None
    assert len(cache) == 1

    cache.clear()
    assert len(cache) == 0


def test_purge_and_stats(cache, clock):
    cache.set("s1", ALICE)
    clock.advance(10)
    cache.set("s2", BOB)
    clock.advance(6)

    stats = cache.stats()
    assert stats.size == 2
    assert stats.expired == 1

    assert cache.purge_expired() == 1
    assert "s1" not in cache
    assert "s2" in cache


def test_ttl_must_be_positive(clock):
    with pytest.raises(ValueError):
        SessionCache(ttl=timedelta(0), clock=clock)
