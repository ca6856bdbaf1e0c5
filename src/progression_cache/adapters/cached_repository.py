"""
Cached Progression Repository - Read-through Wrapper.

Wraps any ProgressionRepository so reads are served from a
ProgressionCache and only misses reach the underlying repository.

Design Notes:
    - Decorator/Wrapper pattern
    - Concurrent misses on the same key share one repository call
    - Not-found results (None) are passed through, never cached
    - Tracks hits/misses per operation
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional, TypeVar
from uuid import UUID

from progression_cache.caching.progression_cache import ProgressionCache
from progression_cache.caching.store import TypedStore
from progression_cache.domain.value_objects import (
    LeaderboardSnapshot,
    PlayerLevel,
    PlayerStats,
    TownLevel,
    TownStats,
)
from progression_cache.interfaces.repository import ProgressionRepository

logger = logging.getLogger(__name__)

V = TypeVar("V")


class CachedProgressionRepository:
    """
    Caching wrapper for ProgressionRepository implementations.

    Usage:
        repository = DatabaseProgressionRepository(connection)
        cached = CachedProgressionRepository(repository, cache)

        # First call: cache miss, loads from repository
        level = cached.load_player_level(player_uuid)

        # Second call within the TTL: cache hit
        level = cached.load_player_level(player_uuid)
    """

    OPERATIONS = (
        "load_player_stats",
        "load_player_level",
        "load_town_stats",
        "load_town_level",
        "load_leaderboard",
    )

    def __init__(
        self,
        repository: ProgressionRepository,
        cache: ProgressionCache,
        leaderboard_limit: int = 10,
    ) -> None:
        """
        Initialize cached repository.

        Args:
            repository: Underlying repository to wrap
            cache: Cache instance shared with other callers
            leaderboard_limit: Entries loaded per leaderboard

        Raises:
            ValueError: If leaderboard_limit is less than 1
        """
        if leaderboard_limit < 1:
            raise ValueError(f"leaderboard_limit must be >= 1, got {leaderboard_limit}")
        self.repository = repository
        self.cache = cache
        self.leaderboard_limit = leaderboard_limit

        self._lock = threading.Lock()
        self._cache_hits: Dict[str, int] = {}
        self._cache_misses: Dict[str, int] = {}

    def load_player_stats(self, player_uuid: UUID) -> Optional[PlayerStats]:
        return self._read_through(
            "load_player_stats",
            self.cache.player_stats,
            str(player_uuid),
            lambda: self.repository.load_player_stats(player_uuid),
        )

    def load_player_level(self, player_uuid: UUID) -> Optional[PlayerLevel]:
        return self._read_through(
            "load_player_level",
            self.cache.player_levels,
            str(player_uuid),
            lambda: self.repository.load_player_level(player_uuid),
        )

    def load_town_stats(self, town_name: str) -> Optional[TownStats]:
        return self._read_through(
            "load_town_stats",
            self.cache.town_stats,
            town_name,
            lambda: self.repository.load_town_stats(town_name),
        )

    def load_town_level(self, town_name: str) -> Optional[TownLevel]:
        return self._read_through(
            "load_town_level",
            self.cache.town_levels,
            town_name,
            lambda: self.repository.load_town_level(town_name),
        )

    def load_leaderboard(
        self,
        category: str,
        limit: Optional[int] = None,
    ) -> Optional[LeaderboardSnapshot]:
        """
        Load a leaderboard through the cache.

        The cache holds one snapshot per category, loaded with
        leaderboard_limit entries. A smaller limit is served from that
        snapshot; a larger one bypasses the cache.

        Args:
            category: Leaderboard category tag
            limit: Entries wanted (defaults to leaderboard_limit)

        Returns:
            Ranked snapshot, or None for an unknown category

        Raises:
            ValueError: If limit is less than 1
        """
        if limit is None:
            limit = self.leaderboard_limit
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        if limit > self.leaderboard_limit:
            return self.repository.load_leaderboard(category, limit)

        snapshot = self._read_through(
            "load_leaderboard",
            self.cache.leaderboard,
            category,
            lambda: self.repository.load_leaderboard(category, self.leaderboard_limit),
        )
        if snapshot is None or limit == self.leaderboard_limit:
            return snapshot
        return snapshot.model_copy(update={"entries": snapshot.top(limit)})

    def refresh_player(self, player_uuid: UUID) -> None:
        """Drop a player's cached data and reload it from the repository."""
        self.cache.invalidate_player(player_uuid)
        self.load_player_stats(player_uuid)
        self.load_player_level(player_uuid)

    def refresh_town(self, town_name: str) -> None:
        """Drop a town's cached data and reload it from the repository."""
        self.cache.invalidate_town(town_name)
        self.load_town_stats(town_name)
        self.load_town_level(town_name)

    def get_cache_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dict with store sizes and operation-specific hit/miss counts
        """
        with self._lock:
            operations = {
                op: {
                    "hits": self._cache_hits.get(op, 0),
                    "misses": self._cache_misses.get(op, 0),
                }
                for op in self.OPERATIONS
            }
        return {
            "cache": self.cache.stats(),
            "operations": operations,
        }

    def _read_through(
        self,
        operation: str,
        store: TypedStore[V],
        key: str,
        load: Callable[[], Optional[V]],
    ) -> Optional[V]:
        loaded = False

        def loader() -> Optional[V]:
            nonlocal loaded
            loaded = True
            return load()

        value = store.get_or_load(key, loader)

        if loaded:
            self._record(self._cache_misses, operation)
            logger.debug(f"Cache MISS for {operation}: {key}")
        else:
            self._record(self._cache_hits, operation)
        return value

    def _record(self, counter: Dict[str, int], operation: str) -> None:
        with self._lock:
            counter[operation] = counter.get(operation, 0) + 1
