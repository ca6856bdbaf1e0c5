"""
Unit Tests for CachedProgressionRepository.

Tests for:
    - Cache hits and misses
    - Repository delegation
    - Statistics tracking
    - Refresh after invalidation
"""

from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING, List, Optional
from unittest.mock import Mock
from uuid import UUID

import pytest

from progression_cache.adapters.cached_repository import CachedProgressionRepository
from progression_cache.adapters.mock_repository import MockProgressionRepository
from progression_cache.caching.progression_cache import ProgressionCache
from progression_cache.domain.value_objects import (
    LeaderboardSnapshot,
    PlayerLevel,
    TownLevel,
)
from progression_cache.interfaces.repository import ProgressionRepository

if TYPE_CHECKING:
    from tests.conftest import ManualClock


@pytest.fixture
def repository(
    sample_player_level: PlayerLevel,
    sample_town_level: TownLevel,
    sample_leaderboard: LeaderboardSnapshot,
) -> Mock:
    """Create a mock progression repository."""
    repository = Mock()
    repository.load_player_level.return_value = sample_player_level
    repository.load_town_level.return_value = sample_town_level
    repository.load_town_stats.return_value = None
    repository.load_leaderboard.return_value = sample_leaderboard
    return repository


@pytest.fixture
def cached(repository: Mock, cache: ProgressionCache) -> CachedProgressionRepository:
    return CachedProgressionRepository(repository, cache, leaderboard_limit=3)


class TestReadThrough:
    """Cache hit/miss behavior."""

    def test_first_call_loads_second_hits(
        self,
        cached: CachedProgressionRepository,
        repository: Mock,
        player_uuid: UUID,
        sample_player_level: PlayerLevel,
    ) -> None:
        """
        SCENARIO: Same player level loaded twice within the TTL
        EXPECTED: Repository called once
        """
        first = cached.load_player_level(player_uuid)
        second = cached.load_player_level(player_uuid)

        assert first == sample_player_level
        assert second == sample_player_level
        repository.load_player_level.assert_called_once_with(player_uuid)

    def test_expired_entry_reloads(
        self,
        cached: CachedProgressionRepository,
        repository: Mock,
        clock: ManualClock,
    ) -> None:
        cached.load_town_level("Riverside")
        clock.advance(601)
        cached.load_town_level("Riverside")

        assert repository.load_town_level.call_count == 2

    def test_not_found_is_not_cached(
        self, cached: CachedProgressionRepository, repository: Mock
    ) -> None:
        """
        SCENARIO: Repository returns None for an unknown town
        EXPECTED: None passed through, next call hits the repository again
        """
        assert cached.load_town_stats("Nowhere") is None
        assert cached.load_town_stats("Nowhere") is None
        assert repository.load_town_stats.call_count == 2

    def test_repository_error_propagates(
        self, cached: CachedProgressionRepository, repository: Mock, player_uuid: UUID
    ) -> None:
        repository.load_player_stats.side_effect = ConnectionError("db down")

        with pytest.raises(ConnectionError):
            cached.load_player_stats(player_uuid)

        assert cached.cache.get_player_stats(player_uuid) is None

    def test_reads_see_direct_cache_writes(
        self,
        cached: CachedProgressionRepository,
        repository: Mock,
        cache: ProgressionCache,
        sample_town_level: TownLevel,
    ) -> None:
        cache.put_town_level("Oakvale", sample_town_level)

        assert cached.load_town_level("Oakvale") == sample_town_level
        repository.load_town_level.assert_not_called()


class TestLeaderboard:
    """Leaderboard limit handling."""

    def test_loads_with_configured_limit(
        self, cached: CachedProgressionRepository, repository: Mock
    ) -> None:
        cached.load_leaderboard("player_level")
        cached.load_leaderboard("player_level")

        repository.load_leaderboard.assert_called_once_with("player_level", 3)

    def test_smaller_limit_served_from_cache(
        self, cached: CachedProgressionRepository, repository: Mock
    ) -> None:
        """
        SCENARIO: Cached top-3, caller wants top-2
        EXPECTED: First two entries, no extra repository call
        """
        cached.load_leaderboard("player_level")

        top_two = cached.load_leaderboard("player_level", limit=2)

        assert [e.name for e in top_two.entries] == ["Alex", "Steve"]
        assert repository.load_leaderboard.call_count == 1

    def test_larger_limit_bypasses_cache(
        self, cached: CachedProgressionRepository, repository: Mock
    ) -> None:
        cached.load_leaderboard("player_level", limit=50)

        repository.load_leaderboard.assert_called_once_with("player_level", 50)
        assert cached.cache.get_leaderboard("player_level") is None

    @pytest.mark.parametrize("limit", [0, -2])
    def test_non_positive_limit_rejected(
        self, cached: CachedProgressionRepository, repository: Mock, limit: int
    ) -> None:
        """
        SCENARIO: Leaderboard requested with limit 0 or a negative limit
        EXPECTED: ValueError before the cache or repository is touched
        """
        with pytest.raises(ValueError, match="limit must be >= 1"):
            cached.load_leaderboard("player_level", limit=limit)

        repository.load_leaderboard.assert_not_called()
        assert cached.cache.detailed_stats()["leaderboard"].misses == 0

    def test_smaller_limit_cut_from_loaded_snapshot(self, cache: ProgressionCache) -> None:
        cached = CachedProgressionRepository(MockProgressionRepository(), cache, leaderboard_limit=5)

        full = cached.load_leaderboard("player_xp")
        one = cached.load_leaderboard("player_xp", limit=1)

        assert full.size == 5
        assert one.entries == full.entries[:1]

    def test_invalid_configured_limit_rejected(self, cache: ProgressionCache) -> None:
        with pytest.raises(ValueError):
            CachedProgressionRepository(MockProgressionRepository(), cache, leaderboard_limit=0)


class TestStatistics:
    """Hit/miss counters per operation."""

    def test_tracks_hits_and_misses(
        self, cached: CachedProgressionRepository, player_uuid: UUID
    ) -> None:
        cached.load_player_level(player_uuid)
        cached.load_player_level(player_uuid)
        cached.load_player_level(player_uuid)
        cached.load_town_level("Riverside")

        stats = cached.get_cache_stats()

        assert stats["operations"]["load_player_level"] == {"hits": 2, "misses": 1}
        assert stats["operations"]["load_town_level"] == {"hits": 0, "misses": 1}
        assert stats["operations"]["load_leaderboard"] == {"hits": 0, "misses": 0}
        assert stats["cache"]["player_levels_cache_size"] == 1


class TestRefresh:
    """Refresh against a repository whose data changes."""

    def test_refresh_player_picks_up_new_data(self, cache: ProgressionCache) -> None:
        """
        SCENARIO: Player gains XP after their level was cached
        EXPECTED: Stale level until refresh_player, new level after
        """
        repository = MockProgressionRepository(seed=7)
        cached = CachedProgressionRepository(repository, cache)
        player = repository.new_player("Newbie")

        assert cached.load_player_level(player).level == 1

        repository.add_player_xp(player, 2500)
        assert cached.load_player_level(player).level == 1

        cached.refresh_player(player)
        assert cached.load_player_level(player).level == 3
        assert repository.load_counts["load_player_level"] == 2

    def test_refresh_town_reloads_both(self, cache: ProgressionCache) -> None:
        repository = MockProgressionRepository()
        cached = CachedProgressionRepository(repository, cache)

        cached.load_town_stats("Oakvale")
        cached.load_town_level("Oakvale")
        cached.refresh_town("Oakvale")

        assert repository.load_counts["load_town_stats"] == 2
        assert repository.load_counts["load_town_level"] == 2
        assert cache.get_town_level("Oakvale") is not None


class TestConcurrentLoads:
    """Concurrent misses share one repository call."""

    def test_concurrent_misses_load_once(self, clock: ManualClock) -> None:
        repository = MockProgressionRepository(load_delay_seconds=0.05)
        cache = ProgressionCache(clock=clock, start_sweeper=False)
        cached = CachedProgressionRepository(repository, cache)
        player = repository.player_uuids[0]
        results: List[Optional[PlayerLevel]] = []
        results_lock = threading.Lock()

        def worker() -> None:
            level = cached.load_player_level(player)
            with results_lock:
                results.append(level)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        try:
            for t in threads:
                t.start()
            for t in threads:
                t.join(timeout=5)

            assert len(results) == 8
            assert len({r.total_xp for r in results}) == 1
            assert repository.load_counts["load_player_level"] == 1
        finally:
            cache.shutdown()

    def test_slow_load_does_not_block_other_keys(self, clock: ManualClock) -> None:
        """
        SCENARIO: One thread in a slow load for town A, another reads town B
        EXPECTED: Town B read finishes well before town A's load
        """
        blocker = threading.Event()

        def slow_load(name: str) -> TownLevel:
            blocker.wait(5)
            return TownLevel(town_name=name)

        repository = Mock()
        repository.load_town_level.side_effect = slow_load

        cache = ProgressionCache(clock=clock, start_sweeper=False)
        cache.put_town_level("B", TownLevel(town_name="B", level=9))
        cached = CachedProgressionRepository(repository, cache)

        slow = threading.Thread(target=cached.load_town_level, args=("A",))
        try:
            slow.start()
            time.sleep(0.05)

            started = time.monotonic()
            assert cached.load_town_level("B").level == 9
            assert time.monotonic() - started < 1.0
            assert slow.is_alive()
        finally:
            blocker.set()
            slow.join(timeout=5)
            cache.shutdown()


class TestProtocol:
    def test_mock_repository_satisfies_protocol(self) -> None:
        assert isinstance(MockProgressionRepository(), ProgressionRepository)
