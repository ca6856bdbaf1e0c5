"""
Progression Repository Protocol.

Defines the abstract interface for the slow persistent lookups the
cache sits in front of. Any data source (database, remote store, fake)
that implements this protocol can be wrapped by
CachedProgressionRepository.

Design Notes:
    - Uses typing.Protocol for structural subtyping
    - A None result means "not found" and is never cached
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable
from uuid import UUID

from progression_cache.domain.value_objects import (
    LeaderboardSnapshot,
    PlayerLevel,
    PlayerStats,
    TownLevel,
    TownStats,
)


@runtime_checkable
class ProgressionRepository(Protocol):
    """Abstract interface for persistent progression lookups."""

    def load_player_stats(self, player_uuid: UUID) -> Optional[PlayerStats]:
        """Load aggregated stats for a player."""
        ...

    def load_player_level(self, player_uuid: UUID) -> Optional[PlayerLevel]:
        """Load the computed level for a player."""
        ...

    def load_town_stats(self, town_name: str) -> Optional[TownStats]:
        """Load stats for a town."""
        ...

    def load_town_level(self, town_name: str) -> Optional[TownLevel]:
        """Load the computed level for a town."""
        ...

    def load_leaderboard(
        self,
        category: str,
        limit: int,
    ) -> Optional[LeaderboardSnapshot]:
        """
        Load a leaderboard.

        Args:
            category: Leaderboard category tag (e.g. "level", "xp")
            limit: Maximum number of entries

        Returns:
            Ranked snapshot, or None for an unknown category
        """
        ...
