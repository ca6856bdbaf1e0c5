"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at load time using Pydantic, so a bad
TTL or bound fails at startup instead of at the first cache write.
"""

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field, model_validator


class CacheSettings(BaseModel):
    """Per-store TTLs and the bound shared by every store."""

    player_stats_ttl_seconds: float = Field(default=300, gt=0)
    player_levels_ttl_seconds: float = Field(default=600, gt=0)
    town_stats_ttl_seconds: float = Field(default=300, gt=0)
    town_levels_ttl_seconds: float = Field(default=600, gt=0)
    leaderboard_ttl_seconds: float = Field(default=60, gt=0)

    # Shared by all stores; at least 2 since overflow_margin >= 1 must stay below it
    max_size: int = Field(default=1000, ge=2)
    # Extra entries removed on overflow so eviction doesn't run on every put
    overflow_margin: int = Field(default=10, ge=1)

    sweep_interval_seconds: float = Field(default=60, gt=0)
    shutdown_grace_seconds: float = Field(default=5, gt=0)

    enabled: bool = True
    log_access: bool = False

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_margin_below_bound(self) -> "CacheSettings":
        if self.overflow_margin >= self.max_size:
            raise ValueError(
                f"overflow_margin ({self.overflow_margin}) must be smaller "
                f"than max_size ({self.max_size})"
            )
        return self

    def ttl_by_store(self) -> Dict[str, float]:
        """TTL in seconds keyed by store name."""
        return {
            "player_stats": self.player_stats_ttl_seconds,
            "player_levels": self.player_levels_ttl_seconds,
            "town_stats": self.town_stats_ttl_seconds,
            "town_levels": self.town_levels_ttl_seconds,
            "leaderboard": self.leaderboard_ttl_seconds,
        }


class HealthSettings(BaseModel):
    """Thresholds for cache health checks."""

    enabled: bool = True
    warn_fill_ratio: float = Field(default=0.9, gt=0, le=1)


class ProgressionConfig(BaseModel):
    """Root configuration object."""

    version: str = "1.0"
    cache: CacheSettings = Field(default_factory=CacheSettings)
    health: HealthSettings = Field(default_factory=HealthSettings)

    model_config = {"populate_by_name": True}
