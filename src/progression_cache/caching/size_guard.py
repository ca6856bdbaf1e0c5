"""
Size Guard - Overflow Eviction by Write Age.

When a store grows past its bound, the guard picks the oldest entries
by creation time and trims the store down to ``max_entries - margin``.
The margin keeps the next few writes from immediately triggering
another trim.

This is recency-of-write eviction, not LRU: reads do not refresh an
entry's position. Entries with equal creation times are removed in the
store's iteration order.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from progression_cache.caching.entry import CacheEntry


class SizeGuard:
    """Selects entries to evict when a store exceeds its bound."""

    def __init__(self, max_entries: int, margin: int = 10) -> None:
        """
        Initialize size guard.

        Args:
            max_entries: Largest size a store may keep after a write
            margin: Extra entries removed below the bound on overflow

        Raises:
            ValueError: If the bound or margin is not usable
        """
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        if margin < 1:
            raise ValueError(f"margin must be >= 1, got {margin}")
        if margin >= max_entries:
            raise ValueError(
                f"margin ({margin}) must be smaller than max_entries ({max_entries})"
            )
        self.max_entries = max_entries
        self.margin = margin

    @property
    def target_size(self) -> int:
        """Size a store is trimmed down to on overflow."""
        return self.max_entries - self.margin

    def is_over(self, size: int) -> bool:
        return size > self.max_entries

    def select_victims(self, entries: Mapping[str, CacheEntry[Any]]) -> List[str]:
        """
        Pick the keys to remove, oldest first.

        Must be called with the owning store's lock held.

        Args:
            entries: The store's key -> entry mapping

        Returns:
            Keys to evict (empty if the store is within bounds)
        """
        if not self.is_over(len(entries)):
            return []

        to_remove = len(entries) - self.target_size
        # sorted() is stable, so equal timestamps keep mapping order
        oldest = sorted(entries.items(), key=lambda item: item[1].created_at)
        return [key for key, _ in oldest[:to_remove]]
