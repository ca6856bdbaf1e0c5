"""
Cache Entry - Immutable Value Wrapper with TTL.

An entry is created once per write and never mutated. Writing the same
key again replaces the entry, which is what resets its age.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

V = TypeVar("V")

# Monotonic clock returning seconds
Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """A cached value with its creation time and time-to-live."""

    value: V
    created_at: float
    ttl_seconds: float

    @classmethod
    def create(
        cls,
        value: V,
        ttl_seconds: float,
        clock: Clock = time.monotonic,
    ) -> "CacheEntry[V]":
        """Wrap a value, stamping it with the current clock reading."""
        return cls(value=value, created_at=clock(), ttl_seconds=ttl_seconds)

    def age(self, now: Optional[float] = None) -> float:
        """Seconds since the entry was created."""
        if now is None:
            now = time.monotonic()
        return now - self.created_at

    def is_expired(self, now: Optional[float] = None) -> bool:
        """
        Check if entry has outlived its TTL.

        Never cached: every call compares against the clock reading
        passed in (or the current monotonic time).
        """
        return self.age(now) > self.ttl_seconds
