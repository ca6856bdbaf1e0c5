"""
Progression Cache - TTL-bounded Caching for Progression Lookups.

An in-memory caching layer that sits in front of slower persistent
lookups for player statistics, player levels, town statistics, town
levels and leaderboard snapshots.

Architecture:
    - One typed store per value kind, owned by a single facade
    - Lazy expiry on read plus a periodic background sweep
    - Oldest-write overflow eviction when a store exceeds its bound
    - Configuration-driven behavior via YAML

Main Components:
    - domain: Cached value types (PlayerStats, PlayerLevel, ...)
    - caching: Entry, TypedStore, SizeGuard, ExpirySweeper, ProgressionCache
    - config: Configuration models and loaders
    - adapters: Read-through repository wrappers
    - observability: Cache health checks

Example:
    >>> from progression_cache import ProgressionCache, load_config
    >>> from progression_cache.domain import TownLevel
    >>> config = load_config("config/default.yaml")
    >>> cache = ProgressionCache(config.cache)
    >>> cache.put_town_level("Riverside", TownLevel(town_name="Riverside", level=4))
    >>> cache.get_town_level("Riverside")
    >>> cache.shutdown()

"""

import logging

from progression_cache.caching import ProgressionCache
from progression_cache.config import CacheSettings, ProgressionConfig, load_config

__version__ = "0.1.0"

__all__ = [
    "CacheSettings",
    "ProgressionCache",
    "ProgressionConfig",
    "configure_logging",
    "load_config",
]


def configure_logging(
    level: int = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for Progression Cache.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level (default: INFO)
        format: Log message format

    Example:
        >>> import progression_cache
        >>> progression_cache.configure_logging(logging.DEBUG)
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("progression_cache").setLevel(level)
