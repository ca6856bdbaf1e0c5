"""
Typed Store - TTL-aware Keyed Storage for One Value Type.

Provides thread-safe storage of CacheEntry objects keyed by string.

Design Notes:
    - One store per concrete value type (no untyped values)
    - Lazy expiry: an expired entry found by a read is removed
    - Overflow handled by SizeGuard inside put()
    - The store lock is only held for dict operations; loaders passed
      to get_or_load() run outside it under a per-key lock
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, List, Optional, Tuple, TypeVar

from progression_cache.caching.entry import CacheEntry, Clock
from progression_cache.caching.size_guard import SizeGuard

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass
class StoreStats:
    """Store statistics."""

    hits: int = 0
    misses: int = 0
    expirations: int = 0
    evictions: int = 0
    invalidations: int = 0
    current_entries: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class TypedStore(Generic[V]):
    """
    Keyed mapping from string key to CacheEntry for one value type.

    Features:
        - Thread-safe with reentrant lock
        - TTL fixed per store, stamped on each entry at write time
        - Oldest-write overflow eviction via SizeGuard
        - Statistics tracking
    """

    def __init__(
        self,
        name: str,
        ttl_seconds: float,
        size_guard: SizeGuard,
        clock: Clock = time.monotonic,
        enabled: bool = True,
        log_access: bool = False,
    ) -> None:
        """
        Initialize store.

        Args:
            name: Store name used in logs and stats
            ttl_seconds: TTL applied to every entry written
            size_guard: Overflow policy shared with sibling stores
            clock: Monotonic clock in seconds
            enabled: If False, reads miss and writes are ignored
            log_access: Log hits and misses at DEBUG

        Raises:
            ValueError: If ttl_seconds is not positive
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be > 0 for store {name}, got {ttl_seconds}")
        self.name = name
        self.ttl_seconds = ttl_seconds
        self.size_guard = size_guard
        self.enabled = enabled
        self.log_access = log_access
        self._clock = clock
        self._entries: Dict[str, CacheEntry[V]] = {}
        self._lock = threading.RLock()
        self._load_locks: Dict[str, threading.Lock] = {}
        self._stats = StoreStats()

    def lookup(self, key: str) -> Tuple[Optional[V], bool]:
        """
        Look up a key.

        Args:
            key: Cache key

        Returns:
            (value, True) on a hit, (None, False) on a miss
        """
        return self._lookup(key, record=True)

    def get(self, key: str) -> Optional[V]:
        """Get value from store, or None on a miss."""
        value, _ = self.lookup(key)
        return value

    def put(self, key: str, value: V) -> None:
        """
        Store a value under key with a fresh creation time.

        Replaces any existing entry. If the store then exceeds its
        bound, the oldest entries are evicted, which may include keys
        unrelated to this one.

        Args:
            key: Cache key
            value: Value to cache
        """
        with self._lock:
            if not self.enabled:
                return
            entry = CacheEntry.create(value, self.ttl_seconds, self._clock)
            self._entries[key] = entry
            if self.size_guard.is_over(len(self._entries)):
                self._evict_overflow()

        if self.log_access:
            logger.debug(f"[{self.name}] SET: {key} (TTL={self.ttl_seconds}s)")

    def invalidate(self, key: str) -> bool:
        """
        Remove a key if present.

        Args:
            key: Cache key to invalidate

        Returns:
            True if an entry was removed, False if it was absent
        """
        with self._lock:
            removed = self._entries.pop(key, None) is not None
            if removed:
                self._stats.invalidations += 1

        if removed:
            logger.debug(f"[{self.name}] INVALIDATED: {key}")
        return removed

    def clear(self) -> int:
        """
        Remove every entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        return count

    def close(self) -> int:
        """
        Disable and empty the store in one step.

        A put() racing with close() either lands before the clear and is
        removed, or sees the store disabled and is dropped.

        Returns:
            Number of entries removed
        """
        with self._lock:
            self.enabled = False
            return self.clear()

    def purge_expired(self) -> int:
        """
        Remove every expired entry.

        Expiry is checked on a snapshot outside the lock, so callers are
        only held up by the copy and the deletes. An entry rewritten
        after the snapshot is kept.

        Returns:
            Number of entries removed
        """
        with self._lock:
            snapshot = list(self._entries.items())

        now = self._clock()
        expired = [(key, entry) for key, entry in snapshot if entry.is_expired(now)]
        if not expired:
            return 0

        removed = 0
        with self._lock:
            for key, entry in expired:
                if self._entries.get(key) is entry:
                    del self._entries[key]
                    removed += 1
            self._stats.expirations += removed
        return removed

    def get_or_load(self, key: str, loader: Callable[[], Optional[V]]) -> Optional[V]:
        """
        Get from store or load and store.

        Concurrent callers missing on the same key share one loader
        call; callers on other keys are not blocked by it. A loader
        returning None is not cached.

        Args:
            key: Cache key
            loader: Function producing the value on a miss

        Returns:
            Cached or loaded value
        """
        value, found = self._lookup(key, record=True)
        if found:
            return value

        key_lock = self._acquire_load_lock(key)
        try:
            # Another caller may have loaded it while we waited
            value, found = self._lookup(key, record=False)
            if found:
                return value

            value = loader()
            if value is not None:
                self.put(key, value)
            return value
        finally:
            self._release_load_lock(key, key_lock)

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: str) -> bool:
        _, found = self._lookup(key, record=False)
        return found

    def keys(self) -> List[str]:
        """Snapshot of current keys, including not-yet-swept expired ones."""
        with self._lock:
            return list(self._entries)

    def get_stats(self) -> StoreStats:
        """Get store statistics."""
        with self._lock:
            return StoreStats(
                hits=self._stats.hits,
                misses=self._stats.misses,
                expirations=self._stats.expirations,
                evictions=self._stats.evictions,
                invalidations=self._stats.invalidations,
                current_entries=len(self._entries),
            )

    def reconfigure(self, ttl_seconds: float, size_guard: SizeGuard) -> None:
        """
        Apply a new TTL and bound to future writes.

        Existing entries keep the TTL they were written with.
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be > 0 for store {self.name}, got {ttl_seconds}")
        with self._lock:
            self.ttl_seconds = ttl_seconds
            self.size_guard = size_guard

    def _lookup(self, key: str, record: bool) -> Tuple[Optional[V], bool]:
        """Shared read path; record=False skips stats and access logs."""
        if not self.enabled:
            return None, False

        with self._lock:
            entry = self._entries.get(key)

            if entry is None:
                if record:
                    self._stats.misses += 1
                outcome = "MISS"
            elif entry.is_expired(self._clock()):
                del self._entries[key]
                self._stats.expirations += 1
                if record:
                    self._stats.misses += 1
                entry = None
                outcome = "EXPIRED"
            else:
                if record:
                    self._stats.hits += 1
                outcome = "HIT"

        if record and self.log_access:
            logger.debug(f"[{self.name}] {outcome}: {key}")

        if entry is None:
            return None, False
        return entry.value, True

    def _evict_overflow(self) -> None:
        """
        Trim to the guard's target size (internal, must hold lock).

        Runs inside put, so it sorts at most max_entries + 1 entries.
        """
        victims = self.size_guard.select_victims(self._entries)
        for key in victims:
            del self._entries[key]
        self._stats.evictions += len(victims)
        logger.debug(
            f"[{self.name}] EVICTED {len(victims)} oldest entries "
            f"(max={self.size_guard.max_entries})"
        )

    def _acquire_load_lock(self, key: str) -> threading.Lock:
        with self._lock:
            key_lock = self._load_locks.setdefault(key, threading.Lock())
        key_lock.acquire()
        return key_lock

    def _release_load_lock(self, key: str, key_lock: threading.Lock) -> None:
        with self._lock:
            if self._load_locks.get(key) is key_lock:
                del self._load_locks[key]
        key_lock.release()
