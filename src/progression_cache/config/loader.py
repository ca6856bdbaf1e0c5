"""
Configuration Loader - Cache Settings from YAML.

Reads one config file, optionally overlays a named profile, and
validates the result into a ProgressionConfig.

Profiles live beside the config file they modify:

    config/default.yaml
    config/profiles/development.yaml

so loading works the same from any working directory. Settings are read
once; reload() re-reads the same files and hands the new cache section
to a running ProgressionCache.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

import yaml

from progression_cache.config.models import ProgressionConfig

if TYPE_CHECKING:
    from progression_cache.caching.progression_cache import ProgressionCache

logger = logging.getLogger(__name__)

PROFILES_DIR = "profiles"


class ConfigLoader:
    """
    Loads cache configuration from a YAML file and optional profile.

    Usage:
        loader = ConfigLoader("/etc/progression/cache.yaml", profile="production")
        cache = ProgressionCache(loader.load().cache)

        # after editing the files
        loader.reload(cache)
    """

    def __init__(
        self,
        config_path: Union[str, Path],
        profile: Optional[str] = None,
    ) -> None:
        """
        Initialize config loader.

        Args:
            config_path: Base YAML file; relative paths resolve against
                the working directory once, here
            profile: Name of an overlay in <config dir>/profiles/
        """
        self.config_path = Path(config_path).expanduser().resolve()
        self.profile = profile

    @property
    def profile_path(self) -> Optional[Path]:
        if not self.profile:
            return None
        return self.config_path.parent / PROFILES_DIR / f"{self.profile}.yaml"

    def load(self) -> ProgressionConfig:
        """
        Read and validate the configuration.

        Returns:
            Validated ProgressionConfig

        Raises:
            FileNotFoundError: If the config file or profile is missing
            ValueError: If a file does not hold a YAML mapping
            ValidationError: If a value is out of range
        """
        raw = _read_mapping(self.config_path)

        profile_path = self.profile_path
        if profile_path is not None:
            if not profile_path.is_file():
                raise FileNotFoundError(
                    f"Profile not found: {self.profile} (expected {profile_path})"
                )
            raw = _deep_merge(raw, _read_mapping(profile_path))

        config = ProgressionConfig.model_validate(raw)
        logger.debug(
            f"Loaded cache config from {self.config_path}"
            + (f" with profile {self.profile}" if self.profile else "")
        )
        return config

    def reload(self, cache: "ProgressionCache") -> ProgressionConfig:
        """
        Re-read the files and apply the cache section to a running cache.

        A file that fails to load or validate leaves the cache untouched.

        Args:
            cache: Cache to reconfigure

        Returns:
            The newly loaded configuration
        """
        config = self.load()
        cache.reconfigure(config.cache)
        return config


def _read_mapping(path: Path) -> Dict[str, Any]:
    """Parse a YAML file that must hold a mapping (an empty file counts as {})."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level, got {type(data).__name__}")
    return data


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay wins; nested sections merge key by key."""
    merged = dict(base)
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config(
    config_path: Union[str, Path],
    profile: Optional[str] = None,
) -> ProgressionConfig:
    """Load and validate a config file with an optional profile overlay."""
    return ConfigLoader(config_path, profile).load()
