from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import timedelta
from threading import Lock
from typing import Callable, Optional

from ..common.scheduling import PeriodicJob
from ..core.constants import SESSION_CLEANUP_INTERVAL, SESSION_TTL
from ..users.model import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedSession:
    user: User
    last_accessed: float
    expires_at: float


@dataclass(frozen=True)
class CacheStats:
    size: int
    expired: int


class SessionCache:
    """Sliding-TTL cache of authenticated users keyed by session id.

    A performance layer in front of the authoritative session store; every
    hit extends the entry's lifetime. Entries are replaced whole under the
    lock, so the cleanup pass never sees a half-written entry. Construct one
    per process and pass it to request handlers.
    """

    def __init__(
        self,
        *,
        ttl: timedelta = SESSION_TTL,
        cleanup_interval: timedelta = SESSION_CLEANUP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl.total_seconds() <= 0:
            raise ValueError("ttl must be positive")
        self._ttl = ttl.total_seconds()
        self._clock = clock
        self._lock = Lock()
        self._entries: dict[str, CachedSession] = {}
        self._cleanup = PeriodicJob(
            self.purge_expired, seconds=cleanup_interval.total_seconds(), name="session-cache-cleanup"
        )

    def set(self, session_id: str, user: User) -> None:
        now = self._clock()
        with self._lock:
            self._entries[session_id] = CachedSession(user=user, last_accessed=now, expires_at=now + self._ttl)

    def get(self, session_id: str) -> Optional[User]:
        now = self._clock()
        with self._lock:
            cached = self._entries.get(session_id)
            if cached is None:
                return None
            if now >= cached.expires_at:
                del self._entries[session_id]
                return None
            self._entries[session_id] = CachedSession(
                user=cached.user, last_accessed=now, expires_at=now + self._ttl
            )
            return cached.user

    def remove(self, session_id: str) -> None:
        with self._lock:
            self._entries.pop(session_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [sid for sid, cached in self._entries.items() if now >= cached.expires_at]
            for sid in expired:
                del self._entries[sid]
        if expired:
            logger.debug("Session cache purged %d expired entries", len(expired))
        return len(expired)

    def stats(self) -> CacheStats:
        now = self._clock()
        with self._lock:
            expired = sum(1 for cached in self._entries.values() if now >= cached.expires_at)
            return CacheStats(size=len(self._entries), expired=expired)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def start_cleanup(self) -> None:
        self._cleanup.start()

    def stop_cleanup(self) -> None:
        self._cleanup.stop()
