"""
Value Objects for Domain Layer.

Cached values are immutable snapshots of what the persistent store
returned. A change in the underlying data means a new snapshot is
written to the cache, never an in-place update.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


# =============================================================================
# Type Aliases for improved readability
# =============================================================================

# Stat values indexed by stat key (e.g. "minecraft:mined:stone")
StatValuesDict = Dict[str, float]


class PlayerStats(BaseModel):
    """Aggregated statistics for one player."""

    player_uuid: UUID
    player_name: Optional[str] = None
    stats: StatValuesDict = Field(default_factory=dict)
    last_updated: datetime = Field(default_factory=datetime.now)

    model_config = {"frozen": True}

    def stat(self, key: str, default: float = 0.0) -> float:
        """Get a single stat value, falling back to default."""
        return self.stats.get(key, default)


class PlayerLevel(BaseModel):
    """Computed level and XP for one player."""

    player_uuid: UUID
    player_name: Optional[str] = None
    level: int = Field(default=1, ge=1)
    current_xp: int = Field(default=0, ge=0)
    total_xp: int = Field(default=0, ge=0)
    level_title: Optional[str] = None

    model_config = {"frozen": True}


class TownStats(BaseModel):
    """Statistics for one town."""

    town_name: str = Field(..., min_length=1)
    population: int = Field(default=0, ge=0)
    balance: float = 0.0
    nation: Optional[str] = None
    plot_count: int = Field(default=0, ge=0)
    size: int = Field(default=0, ge=0)
    mayor: Optional[str] = None
    is_capital: bool = False
    is_independent: bool = True

    model_config = {"frozen": True}


class TownLevel(BaseModel):
    """Computed level and XP for one town."""

    town_name: str = Field(..., min_length=1)
    level: int = Field(default=1, ge=1)
    total_xp: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class LeaderboardEntry(BaseModel):
    """A single ranked row on a leaderboard."""

    rank: int = Field(..., ge=1)
    name: str
    score: float

    model_config = {"frozen": True}


class LeaderboardSnapshot(BaseModel):
    """Ranked leaderboard for one category at a point in time."""

    category: str = Field(..., min_length=1)
    entries: List[LeaderboardEntry] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=datetime.now)

    model_config = {"frozen": True}

    def top(self, n: int) -> List[LeaderboardEntry]:
        """Return the first n entries by rank."""
        return sorted(self.entries, key=lambda e: e.rank)[:n]

    @property
    def size(self) -> int:
        return len(self.entries)
