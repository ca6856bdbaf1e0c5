"""
Progression Cache - Facade over the Five Progression Stores.

Owns one typed store per kind of progression data and the background
sweeper that expires them. Constructed once with explicit settings and
passed to the code that needs it.

Design Notes:
    - Player keys are the player's UUID string; town keys are the town
      name; leaderboard keys are the category tag
    - All stores share one SizeGuard built from max_size and margin
    - shutdown() stops the sweeper first, then empties the stores
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, Optional, Union
from uuid import UUID

from progression_cache.caching.entry import Clock
from progression_cache.caching.size_guard import SizeGuard
from progression_cache.caching.store import StoreStats, TypedStore
from progression_cache.caching.sweeper import ExpirySweeper, SweepReport
from progression_cache.config.models import CacheSettings
from progression_cache.domain.value_objects import (
    LeaderboardSnapshot,
    PlayerLevel,
    PlayerStats,
    TownLevel,
    TownStats,
)

logger = logging.getLogger(__name__)

PlayerId = Union[UUID, str]


class ProgressionCache:
    """
    TTL-bounded cache for player, town and leaderboard lookups.

    Usage:
        cache = ProgressionCache(config.cache)

        stats = cache.get_player_stats(player_uuid)
        if stats is None:
            stats = repository.load_player_stats(player_uuid)
            cache.put_player_stats(player_uuid, stats)

        cache.shutdown()
    """

    PLAYER_STATS = "player_stats"
    PLAYER_LEVELS = "player_levels"
    TOWN_STATS = "town_stats"
    TOWN_LEVELS = "town_levels"
    LEADERBOARD = "leaderboard"

    def __init__(
        self,
        settings: Optional[CacheSettings] = None,
        clock: Clock = time.monotonic,
        start_sweeper: bool = True,
    ) -> None:
        """
        Initialize cache and start the sweeper.

        Args:
            settings: Cache configuration (defaults if None)
            clock: Monotonic clock in seconds, shared by all stores
            start_sweeper: Start the background sweep thread
        """
        self.settings = settings or CacheSettings()
        self._clock = clock
        self._closed = False
        self._shutdown_lock = threading.Lock()

        guard = SizeGuard(self.settings.max_size, self.settings.overflow_margin)
        ttls = self.settings.ttl_by_store()

        self.player_stats: TypedStore[PlayerStats] = self._make_store(
            self.PLAYER_STATS, ttls[self.PLAYER_STATS], guard
        )
        self.player_levels: TypedStore[PlayerLevel] = self._make_store(
            self.PLAYER_LEVELS, ttls[self.PLAYER_LEVELS], guard
        )
        self.town_stats: TypedStore[TownStats] = self._make_store(
            self.TOWN_STATS, ttls[self.TOWN_STATS], guard
        )
        self.town_levels: TypedStore[TownLevel] = self._make_store(
            self.TOWN_LEVELS, ttls[self.TOWN_LEVELS], guard
        )
        self.leaderboard: TypedStore[LeaderboardSnapshot] = self._make_store(
            self.LEADERBOARD, ttls[self.LEADERBOARD], guard
        )

        self.sweeper = ExpirySweeper(
            self.stores,
            interval_seconds=self.settings.sweep_interval_seconds,
        )
        if start_sweeper:
            self.sweeper.start()

        logger.info(
            "ProgressionCache initialized with TTLs: "
            + ", ".join(f"{name}={ttl}s" for name, ttl in ttls.items())
            + f", max_size={self.settings.max_size}"
        )

    # -------------------------------------------------------------------------
    # Player data
    # -------------------------------------------------------------------------

    def get_player_stats(self, player_id: PlayerId) -> Optional[PlayerStats]:
        """Get cached stats for a player, or None."""
        return self.player_stats.get(self._player_key(player_id))

    def put_player_stats(self, player_id: PlayerId, stats: PlayerStats) -> None:
        """Cache stats for a player."""
        if self._reject_after_shutdown(self.PLAYER_STATS):
            return
        self.player_stats.put(self._player_key(player_id), stats)

    def get_player_level(self, player_id: PlayerId) -> Optional[PlayerLevel]:
        """Get cached level for a player, or None."""
        return self.player_levels.get(self._player_key(player_id))

    def put_player_level(self, player_id: PlayerId, level: PlayerLevel) -> None:
        """Cache level for a player."""
        if self._reject_after_shutdown(self.PLAYER_LEVELS):
            return
        self.player_levels.put(self._player_key(player_id), level)

    def invalidate_player(self, player_id: PlayerId) -> None:
        """
        Drop a player's stats and level.

        Two independent removals; each is a no-op if nothing is cached.
        """
        key = self._player_key(player_id)
        self.player_stats.invalidate(key)
        self.player_levels.invalidate(key)
        logger.debug(f"Invalidated cache for player: {key}")

    # -------------------------------------------------------------------------
    # Town data
    # -------------------------------------------------------------------------

    def get_town_stats(self, town_name: str) -> Optional[TownStats]:
        """Get cached stats for a town, or None."""
        return self.town_stats.get(town_name)

    def put_town_stats(self, town_name: str, stats: TownStats) -> None:
        """Cache stats for a town."""
        if self._reject_after_shutdown(self.TOWN_STATS):
            return
        self.town_stats.put(town_name, stats)

    def get_town_level(self, town_name: str) -> Optional[TownLevel]:
        """Get cached level for a town, or None."""
        return self.town_levels.get(town_name)

    def put_town_level(self, town_name: str, level: TownLevel) -> None:
        """Cache level for a town."""
        if self._reject_after_shutdown(self.TOWN_LEVELS):
            return
        self.town_levels.put(town_name, level)

    def invalidate_town(self, town_name: str) -> None:
        """Drop a town's stats and level. No-op if nothing is cached."""
        self.town_stats.invalidate(town_name)
        self.town_levels.invalidate(town_name)
        logger.debug(f"Invalidated cache for town: {town_name}")

    # -------------------------------------------------------------------------
    # Leaderboards
    # -------------------------------------------------------------------------

    def get_leaderboard(self, category: str) -> Optional[LeaderboardSnapshot]:
        """Get cached leaderboard for a category, or None."""
        return self.leaderboard.get(category)

    def put_leaderboard(self, category: str, snapshot: LeaderboardSnapshot) -> None:
        """Cache leaderboard for a category."""
        if self._reject_after_shutdown(self.LEADERBOARD):
            return
        self.leaderboard.put(category, snapshot)

    def invalidate_leaderboard(self, category: str) -> None:
        self.leaderboard.invalidate(category)

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def stores(self) -> Dict[str, TypedStore[Any]]:
        """All stores keyed by store name."""
        return {
            self.PLAYER_STATS: self.player_stats,
            self.PLAYER_LEVELS: self.player_levels,
            self.TOWN_STATS: self.town_stats,
            self.TOWN_LEVELS: self.town_levels,
            self.LEADERBOARD: self.leaderboard,
        }

    def clear_all(self) -> None:
        """Clear every store."""
        for store in self.stores().values():
            store.clear()
        logger.info("All caches cleared")

    def stats(self) -> Dict[str, int]:
        """
        Get current store sizes and the configured bound.

        Returns:
            Mapping of "<store>_cache_size" to entry count, plus
            "max_cache_size"
        """
        snapshot = {
            f"{name}_cache_size": store.size() for name, store in self.stores().items()
        }
        snapshot["max_cache_size"] = self.settings.max_size
        return snapshot

    def detailed_stats(self) -> Dict[str, StoreStats]:
        """Hit/miss/eviction counters per store."""
        return {name: store.get_stats() for name, store in self.stores().items()}

    def sweep_now(self) -> SweepReport:
        """Run one sweep cycle synchronously."""
        return self.sweeper.sweep_once()

    def reconfigure(self, settings: CacheSettings) -> None:
        """
        Apply new settings to a running cache.

        New TTLs and bounds apply to future writes; existing entries
        keep their own TTL. The sweep interval applies from the next
        cycle on.

        Args:
            settings: Replacement cache settings
        """
        guard = SizeGuard(settings.max_size, settings.overflow_margin)
        ttls = settings.ttl_by_store()

        with self._shutdown_lock:
            if self._closed:
                logger.warning("Ignoring reconfigure on a shut down cache")
                return
            for name, store in self.stores().items():
                store.reconfigure(ttls[name], guard)
                store.enabled = settings.enabled
                store.log_access = settings.log_access
            self.sweeper.interval_seconds = settings.sweep_interval_seconds
            self.settings = settings

        logger.info("ProgressionCache reconfigured")

    @property
    def is_closed(self) -> bool:
        return self._closed

    def shutdown(self) -> bool:
        """
        Stop the sweeper and clear all stores.

        Waits up to shutdown_grace_seconds for an in-flight sweep.
        Safe to call more than once.

        Returns:
            True if the sweeper stopped within the grace period
        """
        with self._shutdown_lock:
            if self._closed:
                return True
            self._closed = True

        stopped = self.sweeper.stop(self.settings.shutdown_grace_seconds)
        if not stopped:
            logger.warning("Sweeper forced to stop during shutdown")

        for store in self.stores().values():
            store.close()

        logger.info("ProgressionCache shutdown complete")
        return stopped

    def __enter__(self) -> "ProgressionCache":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()

    def _make_store(self, name: str, ttl_seconds: float, guard: SizeGuard) -> TypedStore[Any]:
        return TypedStore(
            name=name,
            ttl_seconds=ttl_seconds,
            size_guard=guard,
            clock=self._clock,
            enabled=self.settings.enabled,
            log_access=self.settings.log_access,
        )

    def _reject_after_shutdown(self, store_name: str) -> bool:
        if self._closed:
            logger.warning(f"Ignoring write to {store_name} after shutdown")
            return True
        return False

    @staticmethod
    def _player_key(player_id: PlayerId) -> str:
        return str(player_id)
