"""
Interfaces Layer - Abstract Protocols for Dependencies.

Protocols:
    - ProgressionRepository: Persistent lookups the cache fronts

Design Principles:
    - Use typing.Protocol (not ABC) for Pythonic interfaces
    - All methods have clear contracts in docstrings
"""

from progression_cache.interfaces.repository import ProgressionRepository

__all__ = ["ProgressionRepository"]
