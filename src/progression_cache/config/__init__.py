"""
Configuration Layer.

Provides:
    - CacheSettings: Per-store TTLs, shared bound, sweep and shutdown timing
    - HealthSettings: Thresholds for cache health checks
    - ProgressionConfig: Root configuration object
    - ConfigLoader / load_config: YAML loading with profile overlays and reload
"""

from progression_cache.config.loader import ConfigLoader, load_config
from progression_cache.config.models import (
    CacheSettings,
    HealthSettings,
    ProgressionConfig,
)

__all__ = [
    "CacheSettings",
    "ConfigLoader",
    "HealthSettings",
    "ProgressionConfig",
    "load_config",
]
