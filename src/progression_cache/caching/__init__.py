"""
Caching Layer.

Provides caching infrastructure in front of slow progression lookups:
    - CacheEntry: Immutable value wrapper with creation time and TTL
    - TypedStore: Thread-safe TTL-aware store for one value type
    - SizeGuard: Oldest-write overflow eviction
    - ExpirySweeper: Background removal of expired entries
    - ProgressionCache: Facade over the five progression stores
"""

from progression_cache.caching.entry import CacheEntry, Clock
from progression_cache.caching.progression_cache import ProgressionCache
from progression_cache.caching.size_guard import SizeGuard
from progression_cache.caching.store import StoreStats, TypedStore
from progression_cache.caching.sweeper import ExpirySweeper, SweepReport

__all__ = [
    "CacheEntry",
    "Clock",
    "ExpirySweeper",
    "ProgressionCache",
    "SizeGuard",
    "StoreStats",
    "SweepReport",
    "TypedStore",
]
