"""
Rate Limiter - Fixed-Window Request Limiting per Client
=======================================================

ARCHITECTURAL DECISION:
- The limiter only decides; counting lives behind RateLimitStore
- InMemoryRateLimitStore is process-local and best-effort: a restart clears
  it, and records of clients that stop calling are never purged
- For several worker processes, implement RateLimitStore on a shared store
  (e.g. Redis INCR + EXPIRE) without touching the call sites

Semantics per client: the first request of a window sets the count to 1;
requests 1..limit are admitted, request limit+1 is denied until the window
rolls over.
"""

import math
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional


@dataclass
class RateLimitRecord:
    """Request count of one client in the current window."""

    count: int
    reset_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.reset_at


class RateLimitStore(ABC):
    """Storage capability the limiter needs: get and increment-with-expiry."""

    @abstractmethod
    def get(self, key: str) -> Optional[RateLimitRecord]:
        """Current record for key, or None."""
        ...

    @abstractmethod
    def increment(self, key: str, window_seconds: float, now: float) -> RateLimitRecord:
        """
        Count one request for key and return the updated record.
        Starts a new window (count 1) when there is no record or it expired.
        """
        ...


class InMemoryRateLimitStore(RateLimitStore):
    """Dict-backed store guarded by a lock."""

    def __init__(self):
        self._records: dict[str, RateLimitRecord] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[RateLimitRecord]:
        with self._lock:
            record = self._records.get(key)
            if record is None:
                return None
            return RateLimitRecord(record.count, record.reset_at)

    def increment(self, key: str, window_seconds: float, now: float) -> RateLimitRecord:
        with self._lock:
            record = self._records.get(key)
            if record is None or record.is_expired(now):
                record = RateLimitRecord(count=1, reset_at=now + window_seconds)
                self._records[key] = record
            else:
                record.count += 1
            return RateLimitRecord(record.count, record.reset_at)

    def __len__(self) -> int:
        return len(self._records)


class RateLimiter:
    """
    Admit/deny decision per client identifier (the client IP).

    USAGE:
        limiter = RateLimiter(InMemoryRateLimitStore(), limit=10)
        if not limiter.allow(client_ip):
            ...respond 429...
    """

    def __init__(
        self,
        store: RateLimitStore,
        limit: int = 10,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._store = store
        self._limit = limit
        self._window = window_seconds
        self._clock = clock

    @property
    def limit(self) -> int:
        return self._limit

    def allow(self, client_id: str) -> bool:
        record = self._store.increment(client_id, self._window, self._clock())
        return record.count <= self._limit

    def retry_after(self, client_id: str) -> int:
        """Whole seconds until the client's window rolls over."""
        record = self._store.get(client_id)
        if record is None:
            return 0
        return max(0, math.ceil(record.reset_at - self._clock()))
