"""
Adapters Package - Infrastructure Implementations.

Concrete implementations of the interfaces defined in the interfaces
package.

Repositories:
    - MockProgressionRepository: Fake data for development/testing
    - CachedProgressionRepository: Read-through caching wrapper

Design Principles:
    - All adapters implement their respective protocols
    - Easily swappable via Dependency Injection
"""

from progression_cache.adapters.cached_repository import CachedProgressionRepository
from progression_cache.adapters.mock_repository import MockProgressionRepository

__all__ = [
    "CachedProgressionRepository",
    "MockProgressionRepository",
]
