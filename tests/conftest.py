"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

import random
from pathlib import Path
from typing import Iterator
from uuid import UUID

import pytest

from progression_cache.adapters.mock_repository import MockProgressionRepository
from progression_cache.caching.progression_cache import ProgressionCache
from progression_cache.caching.size_guard import SizeGuard
from progression_cache.config.models import CacheSettings
from progression_cache.domain.value_objects import (
    LeaderboardEntry,
    LeaderboardSnapshot,
    PlayerLevel,
    PlayerStats,
    TownLevel,
    TownStats,
)


class ManualClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def set_random_seed():
    """Ensure all tests are deterministic."""
    random.seed(42)
    yield


@pytest.fixture
def clock() -> ManualClock:
    """Manually advanced clock."""
    return ManualClock()


@pytest.fixture
def sample_config_path() -> Path:
    """Path to sample configuration file."""
    return Path(__file__).parent / "fixtures" / "sample_config.yaml"


@pytest.fixture
def default_settings() -> CacheSettings:
    """Create default cache settings."""
    return CacheSettings()


@pytest.fixture
def small_settings() -> CacheSettings:
    """Settings with a tiny bound so overflow is easy to trigger."""
    return CacheSettings(max_size=5, overflow_margin=2)


@pytest.fixture
def size_guard() -> SizeGuard:
    """Guard with a bound of 5 and margin of 2."""
    return SizeGuard(max_entries=5, margin=2)


@pytest.fixture
def cache(clock: ManualClock, default_settings: CacheSettings) -> Iterator[ProgressionCache]:
    """Cache on the manual clock with no background sweeper."""
    cache = ProgressionCache(default_settings, clock=clock, start_sweeper=False)
    yield cache
    cache.shutdown()


@pytest.fixture
def mock_repository() -> MockProgressionRepository:
    """Create mock repository for testing."""
    return MockProgressionRepository(seed=42)


@pytest.fixture
def player_uuid() -> UUID:
    """A fixed player UUID."""
    return UUID("8667ba71-b85a-4004-af54-457a9734eed7")


@pytest.fixture
def sample_player_stats(player_uuid: UUID) -> PlayerStats:
    """Create sample player stats."""
    return PlayerStats(
        player_uuid=player_uuid,
        player_name="Steve",
        stats={"minecraft:mined:stone": 1200.0, "minecraft:custom:deaths": 3.0},
    )


@pytest.fixture
def sample_player_level(player_uuid: UUID) -> PlayerLevel:
    """Create sample player level."""
    return PlayerLevel(
        player_uuid=player_uuid,
        player_name="Steve",
        level=7,
        current_xp=250,
        total_xp=6250,
    )


@pytest.fixture
def sample_town_stats() -> TownStats:
    """Create sample town stats."""
    return TownStats(
        town_name="Riverside",
        population=12,
        balance=5400.5,
        nation="Avalon",
        plot_count=48,
        size=48,
        mayor="Steve",
        is_capital=True,
        is_independent=False,
    )


@pytest.fixture
def sample_town_level() -> TownLevel:
    """Create sample town level."""
    return TownLevel(town_name="Riverside", level=4, total_xp=3900)


@pytest.fixture
def sample_leaderboard() -> LeaderboardSnapshot:
    """Create sample leaderboard."""
    return LeaderboardSnapshot(
        category="player_level",
        entries=[
            LeaderboardEntry(rank=1, name="Alex", score=12),
            LeaderboardEntry(rank=2, name="Steve", score=7),
            LeaderboardEntry(rank=3, name="Notch", score=5),
        ],
    )
