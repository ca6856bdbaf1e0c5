"""
Unit Tests for CacheEntry.

Test Aspects Covered:
    ✅ Business Logic: Expiry boundary, age
    ✅ Edge Cases: Exactly at TTL, immutability
"""

from __future__ import annotations

import dataclasses

import pytest

from progression_cache.caching.entry import CacheEntry


class TestCacheEntry:
    """Tests for CacheEntry dataclass."""

    def test_not_expired_before_ttl(self) -> None:
        """
        SCENARIO: Checked halfway through its TTL
        EXPECTED: Not expired
        """
        entry = CacheEntry(value="a", created_at=100.0, ttl_seconds=10.0)
        assert not entry.is_expired(105.0)

    def test_not_expired_exactly_at_ttl(self) -> None:
        """
        SCENARIO: Age equals TTL
        EXPECTED: Not expired (expiry needs age strictly greater than TTL)
        """
        entry = CacheEntry(value="a", created_at=100.0, ttl_seconds=10.0)
        assert not entry.is_expired(110.0)

    def test_expired_after_ttl(self) -> None:
        """
        SCENARIO: Age just past TTL
        EXPECTED: Expired
        """
        entry = CacheEntry(value="a", created_at=100.0, ttl_seconds=10.0)
        assert entry.is_expired(110.001)

    def test_expiry_recomputed_on_every_check(self) -> None:
        """
        SCENARIO: Same entry checked at two different times
        EXPECTED: Result follows the clock, nothing is memoized
        """
        entry = CacheEntry(value="a", created_at=0.0, ttl_seconds=1.0)

        assert not entry.is_expired(0.5)
        assert entry.is_expired(2.0)
        assert not entry.is_expired(0.5)

    def test_create_stamps_clock_reading(self) -> None:
        """
        SCENARIO: Entry created through create() with an injected clock
        EXPECTED: created_at is the clock value
        """
        entry = CacheEntry.create("v", ttl_seconds=5.0, clock=lambda: 42.0)

        assert entry.created_at == 42.0
        assert entry.ttl_seconds == 5.0
        assert entry.age(44.5) == pytest.approx(2.5)

    def test_entry_is_immutable(self) -> None:
        """
        SCENARIO: Attempt to change an entry's value
        EXPECTED: FrozenInstanceError
        """
        entry = CacheEntry(value="a", created_at=0.0, ttl_seconds=1.0)

        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.value = "b"  # type: ignore[misc]
