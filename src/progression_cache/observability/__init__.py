"""
Observability Package.

Provides:
    - CacheHealthMonitor: Health checks over cache stats and the sweeper
"""

from progression_cache.observability.health_monitor import (
    CacheHealthMonitor,
    HealthCheck,
    HealthCheckResult,
    HealthStatus,
)

__all__ = [
    "CacheHealthMonitor",
    "HealthCheck",
    "HealthCheckResult",
    "HealthStatus",
]
