"""
Process-local record stores for fallback mode.

Each domain keeps the records it synthesizes while the gateway is unavailable
(verification codes, bookings, triage sessions, appeals) in its own store.
Stores are injected into the fallback generators so they can be swapped for a
shared backend without touching domain logic.
"""

import logging
from abc import ABC, abstractmethod
from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Callable, ContextManager, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RecordStore(ABC, Generic[T]):
    """Keyed storage for fallback records."""

    @abstractmethod
    def get(self, key: str) -> Optional[T]:
        """Return the record stored under ``key`` or None."""

    @abstractmethod
    def put(self, key: str, record: T) -> None:
        """Create or replace the record stored under ``key``."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns False if it was not present."""

    @abstractmethod
    def values(self) -> list[T]:
        """Snapshot of all stored records."""

    @abstractmethod
    def lock(self, key: str) -> ContextManager:
        """
        Lock guarding read-modify-write sequences on a single record.

        Callers hold it across get -> mutate -> put/delete so that two
        concurrent updates of the same record cannot interleave.
        """

    @abstractmethod
    def __len__(self) -> int:
        pass

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class InMemoryRecordStore(RecordStore[T]):
    """
    Thread-safe dict-backed store with a TTL sweep and an LRU bound.

    Expired entries are swept on every ``put``; when the store still holds more
    than ``max_records`` entries the least recently used ones are evicted.
    """

    def __init__(
        self,
        name: str,
        ttl_seconds: Optional[float] = None,
        max_records: Optional[int] = None,
        clock: Clock = utc_now,
    ):
        self.name = name
        self.ttl_seconds = ttl_seconds
        self.max_records = max_records
        self._clock = clock
        # key -> (stored_at, record)
        self._records: "OrderedDict[str, tuple[datetime, T]]" = OrderedDict()
        self._records_lock = Lock()
        self._key_locks: dict[str, Lock] = {}
        # keys whose lock was still held when their record went away
        self._orphan_locks: set[str] = set()

    def get(self, key: str) -> Optional[T]:
        with self._records_lock:
            entry = self._records.get(key)
            if entry is None:
                return None
            self._records.move_to_end(key)
            return entry[1]

    def put(self, key: str, record: T) -> None:
        with self._records_lock:
            self._records[key] = (self._clock(), record)
            self._records.move_to_end(key)
            self._sweep_locked()

    def delete(self, key: str) -> bool:
        with self._records_lock:
            removed = self._records.pop(key, None) is not None
            self._forget_lock_locked(key)
            return removed

    def values(self) -> list[T]:
        with self._records_lock:
            return [record for _, record in self._records.values()]

    def lock(self, key: str) -> Lock:
        with self._records_lock:
            key_lock = self._key_locks.get(key)
            if key_lock is None:
                key_lock = Lock()
                self._key_locks[key] = key_lock
                if key not in self._records:
                    self._orphan_locks.add(key)
            return key_lock

    def __len__(self) -> int:
        with self._records_lock:
            return len(self._records)

    def _forget_lock_locked(self, key: str) -> None:
        """
        Drop the per-key lock of a removed record. Caller holds ``_records_lock``.

        A lock that is held right now stays in the table so later callers queue
        on it; it is dropped by a later sweep once released.
        """
        key_lock = self._key_locks.get(key)
        if key_lock is None:
            return
        if key_lock.locked():
            self._orphan_locks.add(key)
        else:
            del self._key_locks[key]
            self._orphan_locks.discard(key)

    def _sweep_locked(self) -> None:
        """Drop expired and overflowing entries. Caller holds ``_records_lock``."""
        for k in list(self._orphan_locks):
            if k in self._records:
                self._orphan_locks.discard(k)
            else:
                self._forget_lock_locked(k)

        expired = 0
        if self.ttl_seconds is not None:
            cutoff = self._clock() - timedelta(seconds=self.ttl_seconds)
            stale = [k for k, (stored_at, _) in self._records.items() if stored_at < cutoff]
            for k in stale:
                del self._records[k]
                self._forget_lock_locked(k)
            expired = len(stale)

        evicted = 0
        if self.max_records is not None:
            while len(self._records) > self.max_records:
                k, _ = self._records.popitem(last=False)
                self._forget_lock_locked(k)
                evicted += 1

        if expired or evicted:
            logger.debug(
                f"🧹 {self.name} store swept {expired} expired and evicted {evicted} records"
            )
