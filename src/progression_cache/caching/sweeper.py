"""
Expiry Sweeper - Periodic Background Removal of Expired Entries.

Lazy expiry only catches keys that are read again. The sweeper bounds
memory for keys that are written once and rarely read by purging every
store on a fixed interval.

Design Notes:
    - One daemon thread per sweeper, woken by Event.wait(interval)
    - A failing store is logged and skipped; the other stores in the
      cycle are still swept and later cycles still run
    - stop() sets the event, which also interrupts an in-flight cycle
      between stores, then waits at most the grace period
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from progression_cache.caching.store import TypedStore

logger = logging.getLogger(__name__)

# Returns the stores to sweep, read fresh on each cycle
StoreSource = Callable[[], Mapping[str, TypedStore[Any]]]


@dataclass
class SweepReport:
    """Result of one sweep cycle."""

    removed: Dict[str, int] = field(default_factory=dict)
    failed: List[Tuple[str, Exception]] = field(default_factory=list)
    interrupted: bool = False

    @property
    def total_removed(self) -> int:
        return sum(self.removed.values())

    @property
    def has_failures(self) -> bool:
        """Check if any store failed to sweep."""
        return len(self.failed) > 0


class ExpirySweeper:
    """
    Runs sweep cycles over a set of stores on a background thread.

    Usage:
        sweeper = ExpirySweeper(lambda: stores, interval_seconds=60)
        sweeper.start()
        ...
        sweeper.stop(grace_seconds=5)
    """

    def __init__(
        self,
        store_source: StoreSource,
        interval_seconds: float = 60.0,
        name: str = "progression-cache-sweeper",
    ) -> None:
        """
        Initialize sweeper.

        Args:
            store_source: Callable returning the stores to sweep
            interval_seconds: Delay between cycles
            name: Thread name

        Raises:
            ValueError: If interval_seconds is not positive
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        self._store_source = store_source
        self.interval_seconds = interval_seconds
        self.name = name
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        # Guards the thread handle and the cycle counters below
        self._lock = threading.Lock()
        self.cycles = 0
        self.failed_cycles = 0
        self.last_report: Optional[SweepReport] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    @property
    def started(self) -> bool:
        return self._thread is not None

    def counters(self) -> Tuple[int, int]:
        """Consistent (cycles, failed_cycles) pair."""
        with self._lock:
            return self.cycles, self.failed_cycles

    def start(self) -> None:
        """Start the background thread. Calling start() twice is a no-op."""
        with self._lock:
            if self._thread is not None:
                return
            self._thread = threading.Thread(
                target=self._run,
                name=self.name,
                daemon=True,
            )
            self._thread.start()
        logger.debug(f"Sweeper started (interval={self.interval_seconds}s)")

    def stop(self, grace_seconds: float = 5.0) -> bool:
        """
        Stop the background thread.

        Args:
            grace_seconds: How long to wait for an in-flight cycle

        Returns:
            True if the thread stopped within the grace period
        """
        self._stop_event.set()

        thread = self._thread
        if thread is None or thread is threading.current_thread():
            return True

        thread.join(timeout=grace_seconds)
        if thread.is_alive():
            # Daemon thread: abandoned here and reaped at interpreter exit
            logger.warning(
                f"Sweeper did not stop within {grace_seconds}s, abandoning thread"
            )
            return False

        logger.debug("Sweeper stopped")
        return True

    def sweep_once(self) -> SweepReport:
        """Run one full cycle on the calling thread."""
        return self._sweep(interruptible=False)

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            try:
                self._sweep(interruptible=True)
            except Exception:
                with self._lock:
                    self.failed_cycles += 1
                logger.exception("Sweep cycle failed")

    def _sweep(self, interruptible: bool) -> SweepReport:
        report = SweepReport()

        for store_name, store in self._store_source().items():
            if interruptible and self._stop_event.is_set():
                report.interrupted = True
                break
            try:
                report.removed[store_name] = store.purge_expired()
            except Exception as e:
                report.failed.append((store_name, e))
                logger.exception(f"Sweep failed for store {store_name}")

        with self._lock:
            self.cycles += 1
            if report.has_failures:
                self.failed_cycles += 1
            self.last_report = report

        if report.total_removed > 0:
            logger.debug(f"Cleaned up {report.total_removed} expired cache entries")

        return report
