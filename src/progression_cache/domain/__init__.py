"""
Domain Layer - Cached Value Types.

Each cache store holds exactly one of these types, so a read never has
to cast an untyped value back into its concrete shape.

Value Objects:
    - PlayerStats: Aggregated statistics for a player
    - PlayerLevel: Level and XP for a player
    - TownStats: Statistics for a town
    - TownLevel: Level and XP for a town
    - LeaderboardSnapshot: Ranked entries for one leaderboard category

Design Principles:
    - Immutable (frozen pydantic models)
    - No infrastructure dependencies
"""

from progression_cache.domain.value_objects import (
    LeaderboardEntry,
    LeaderboardSnapshot,
    PlayerLevel,
    PlayerStats,
    StatValuesDict,
    TownLevel,
    TownStats,
)

__all__ = [
    "LeaderboardEntry",
    "LeaderboardSnapshot",
    "PlayerLevel",
    "PlayerStats",
    "StatValuesDict",
    "TownLevel",
    "TownStats",
]
