"""
Mock Progression Repository.

A fake repository for development and testing. Generates deterministic
players, towns and leaderboards from a seed and counts every load so
tests can tell cache hits from repository calls.
"""

from __future__ import annotations

import random
import threading
import time
import uuid
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from progression_cache.domain.value_objects import (
    LeaderboardEntry,
    LeaderboardSnapshot,
    PlayerLevel,
    PlayerStats,
    TownLevel,
    TownStats,
)

# XP needed per level in the mock data
XP_PER_LEVEL = 1000


class MockProgressionRepository:
    """Fake repository for development and testing."""

    MOCK_PLAYERS = [
        "Steve",
        "Alex",
        "Notch",
        "Herobrine",
        "Dinnerbone",
        "Jeb",
        "Grumm",
        "Marc",
        "Kai",
        "Sunny",
    ]

    # (town, nation, mayor)
    MOCK_TOWNS = [
        ("Riverside", "Avalon", "Steve"),
        ("Oakvale", "Avalon", "Alex"),
        ("Stonehold", "Karak", "Notch"),
        ("Frostmere", None, "Jeb"),
        ("Sandport", "Karak", "Kai"),
    ]

    LEADERBOARD_CATEGORIES = ("player_level", "player_xp", "town_level")

    def __init__(self, seed: int = 42, load_delay_seconds: float = 0.0) -> None:
        """
        Initialize mock repository with random seed.

        Args:
            seed: Random seed for reproducibility
            load_delay_seconds: Sleep per load to simulate a slow backend
        """
        self._seed = seed
        self._rng = random.Random(seed)
        self.load_delay_seconds = load_delay_seconds
        self._lock = threading.Lock()
        self.load_counts: Dict[str, int] = {}

        self._player_names: Dict[UUID, str] = {
            UUID(int=self._rng.getrandbits(128), version=4): name
            for name in self.MOCK_PLAYERS
        }
        self._player_xp: Dict[UUID, int] = {
            player_uuid: self._rng.randint(0, 25_000) for player_uuid in self._player_names
        }
        self._town_xp: Dict[str, int] = {
            town: self._rng.randint(0, 50_000) for town, _, _ in self.MOCK_TOWNS
        }

    @property
    def player_uuids(self) -> List[UUID]:
        return list(self._player_names)

    @property
    def town_names(self) -> List[str]:
        return [town for town, _, _ in self.MOCK_TOWNS]

    def load_player_stats(self, player_uuid: UUID) -> Optional[PlayerStats]:
        """Get mock stats for a player."""
        self._record_load("load_player_stats")
        name = self._player_names.get(player_uuid)
        if name is None:
            return None

        # Stable per player, independent of call order
        rng = random.Random(f"{self._seed}:{player_uuid}")
        return PlayerStats(
            player_uuid=player_uuid,
            player_name=name,
            stats={
                "minecraft:mined:stone": float(rng.randint(0, 20_000)),
                "minecraft:killed:zombie": float(rng.randint(0, 500)),
                "minecraft:custom:play_time": float(rng.randint(0, 2_000_000)),
                "minecraft:custom:deaths": float(rng.randint(0, 200)),
            },
        )

    def load_player_level(self, player_uuid: UUID) -> Optional[PlayerLevel]:
        """Get mock level for a player."""
        self._record_load("load_player_level")
        name = self._player_names.get(player_uuid)
        if name is None:
            return None

        total_xp = self._player_xp[player_uuid]
        return PlayerLevel(
            player_uuid=player_uuid,
            player_name=name,
            level=1 + total_xp // XP_PER_LEVEL,
            current_xp=total_xp % XP_PER_LEVEL,
            total_xp=total_xp,
        )

    def load_town_stats(self, town_name: str) -> Optional[TownStats]:
        """Get mock stats for a town."""
        self._record_load("load_town_stats")
        town = self._find_town(town_name)
        if town is None:
            return None

        name, nation, mayor = town
        rng = random.Random(f"{self._seed}:{name}")
        return TownStats(
            town_name=name,
            population=rng.randint(1, 40),
            balance=round(rng.uniform(0, 100_000), 2),
            nation=nation,
            plot_count=rng.randint(4, 200),
            size=rng.randint(4, 200),
            mayor=mayor,
            is_capital=name in ("Riverside", "Stonehold"),
            is_independent=nation is None,
        )

    def load_town_level(self, town_name: str) -> Optional[TownLevel]:
        """Get mock level for a town."""
        self._record_load("load_town_level")
        if self._find_town(town_name) is None:
            return None

        total_xp = self._town_xp[town_name]
        return TownLevel(
            town_name=town_name,
            level=1 + total_xp // XP_PER_LEVEL,
            total_xp=total_xp,
        )

    def load_leaderboard(
        self,
        category: str,
        limit: int,
    ) -> Optional[LeaderboardSnapshot]:
        """Rank mock players or towns for a leaderboard category."""
        self._record_load("load_leaderboard")

        if category == "player_xp":
            scores = {
                self._player_names[player_uuid]: float(xp)
                for player_uuid, xp in self._player_xp.items()
            }
        elif category == "player_level":
            scores = {
                self._player_names[player_uuid]: float(1 + xp // XP_PER_LEVEL)
                for player_uuid, xp in self._player_xp.items()
            }
        elif category == "town_level":
            scores = {
                town: float(1 + xp // XP_PER_LEVEL) for town, xp in self._town_xp.items()
            }
        else:
            return None

        ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))[:limit]
        return LeaderboardSnapshot(
            category=category,
            entries=[
                LeaderboardEntry(rank=i + 1, name=name, score=score)
                for i, (name, score) in enumerate(ranked)
            ],
            generated_at=datetime.now(),
        )

    def add_player_xp(self, player_uuid: UUID, xp: int) -> None:
        """Change underlying data so tests can observe stale vs refreshed reads."""
        self._player_xp[player_uuid] = self._player_xp.get(player_uuid, 0) + xp

    def new_player(self, name: str) -> UUID:
        """Register a player with zero XP and return its UUID."""
        player_uuid = uuid.uuid4()
        self._player_names[player_uuid] = name
        self._player_xp[player_uuid] = 0
        return player_uuid

    def _find_town(self, town_name: str) -> Optional[tuple]:
        for town in self.MOCK_TOWNS:
            if town[0] == town_name:
                return town
        return None

    def _record_load(self, operation: str) -> None:
        with self._lock:
            self.load_counts[operation] = self.load_counts.get(operation, 0) + 1
        if self.load_delay_seconds > 0:
            time.sleep(self.load_delay_seconds)
