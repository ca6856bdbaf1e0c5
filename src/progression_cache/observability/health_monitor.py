"""
Health Monitor - Cache Health Checks.

Turns a cache's stats snapshot into pass/warn/fail checks for health
endpoints and diagnostics:
    - Fill ratio per store against the shared bound
    - Sweeper thread alive while the cache is open
    - Sweep cycles that hit errors

Design Notes:
    - Thresholds from HealthSettings
    - Returns HealthStatus with pass/fail and details
    - Read-only: checks never change cache state
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from progression_cache.caching.progression_cache import ProgressionCache
from progression_cache.config.models import HealthSettings

logger = logging.getLogger(__name__)


class HealthCheckResult(Enum):
    """Result of a health check."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass
class HealthCheck:
    """Individual health check result."""
    name: str
    result: HealthCheckResult
    message: str
    value: Optional[float] = None
    threshold: Optional[float] = None


@dataclass
class HealthStatus:
    """Overall health status."""
    is_healthy: bool
    checks: List[HealthCheck] = field(default_factory=list)
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()

    def add_check(self, check: HealthCheck) -> None:
        """Add a health check result."""
        self.checks.append(check)
        if check.result == HealthCheckResult.FAIL:
            self.is_healthy = False

    @property
    def summary(self) -> Dict[str, Any]:
        """Get summary of health status."""
        return {
            "is_healthy": self.is_healthy,
            "timestamp": self.timestamp,
            "checks": {
                c.name: {
                    "result": c.result.value,
                    "message": c.message,
                    "value": c.value,
                    "threshold": c.threshold,
                }
                for c in self.checks
            },
        }


class CacheHealthMonitor:
    """
    Check the health of a ProgressionCache.

    Performs checks:
        - Fill ratio of every store
        - Sweeper liveness
        - Failed sweep cycles
    """

    def __init__(self, config: Optional[HealthSettings] = None) -> None:
        """
        Initialize health monitor.

        Args:
            config: Health check thresholds
        """
        self.config = config or HealthSettings()

    def check(self, cache: ProgressionCache) -> HealthStatus:
        """
        Run all checks against a cache.

        Args:
            cache: Cache to inspect

        Returns:
            HealthStatus with check results
        """
        status = HealthStatus(is_healthy=True)

        if not self.config.enabled:
            return status

        max_size = cache.settings.max_size
        for name, store in cache.stores().items():
            status.add_check(self._check_fill(name, store.size(), max_size))

        status.add_check(self._check_sweeper(cache))

        for check in status.checks:
            if check.result != HealthCheckResult.PASS:
                self._log_anomaly(check)

        return status

    def _check_fill(self, store_name: str, size: int, max_size: int) -> HealthCheck:
        """Check how full one store is."""
        ratio = size / max_size
        name = f"{store_name}_fill"

        if size > max_size:
            return HealthCheck(
                name=name,
                result=HealthCheckResult.FAIL,
                message=f"{store_name} holds {size} entries, above bound {max_size}",
                value=ratio,
                threshold=1.0,
            )
        elif ratio >= self.config.warn_fill_ratio:
            return HealthCheck(
                name=name,
                result=HealthCheckResult.WARN,
                message=f"{store_name} at {ratio:.0%} of bound {max_size}",
                value=ratio,
                threshold=self.config.warn_fill_ratio,
            )
        else:
            return HealthCheck(
                name=name,
                result=HealthCheckResult.PASS,
                message=f"{store_name} at {ratio:.0%} of bound OK",
                value=ratio,
                threshold=self.config.warn_fill_ratio,
            )

    def _check_sweeper(self, cache: ProgressionCache) -> HealthCheck:
        """Check the background sweeper."""
        sweeper = cache.sweeper

        if cache.is_closed:
            return HealthCheck(
                name="sweeper",
                result=HealthCheckResult.PASS,
                message="Cache shut down, sweeper stopped",
            )
        if not sweeper.started:
            return HealthCheck(
                name="sweeper",
                result=HealthCheckResult.WARN,
                message="Sweeper not started, only lazy expiry active",
            )
        if not sweeper.is_running and not sweeper.stop_requested:
            return HealthCheck(
                name="sweeper",
                result=HealthCheckResult.FAIL,
                message="Sweeper thread died while cache is open",
            )
        cycles, failed_cycles = sweeper.counters()
        if failed_cycles > 0:
            return HealthCheck(
                name="sweeper",
                result=HealthCheckResult.WARN,
                message=f"{failed_cycles} of {cycles} sweep cycles had errors",
                value=float(failed_cycles),
                threshold=0.0,
            )
        return HealthCheck(
            name="sweeper",
            result=HealthCheckResult.PASS,
            message=f"Sweeper running ({cycles} cycles)",
            value=float(cycles),
        )

    def _log_anomaly(self, check: HealthCheck) -> None:
        """Log health check anomaly."""
        log_fn = logger.error if check.result == HealthCheckResult.FAIL else logger.warning
        log_fn(f"Health check {check.name}: {check.message}")
