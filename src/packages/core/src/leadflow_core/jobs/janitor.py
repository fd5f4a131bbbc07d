"""Periodic pruning of finished jobs."""
import threading

import structlog

from leadflow_core.jobs.registry import JobRegistry

logger = structlog.get_logger()


class Janitor:
    """Sweeps a registry on a fixed interval, whether or not jobs are running."""

    def __init__(self, registry: JobRegistry, interval_seconds: float = 3600.0):
        self.registry = registry
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> int:
        try:
            return self.registry.sweep()
        except Exception as e:
            logger.exception("janitor_sweep_failed", error=str(e))
            return 0

    def _loop(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            self.run_once()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="job-janitor", daemon=True)
        self._thread.start()
        logger.info("janitor_started", interval_seconds=self.interval_seconds)

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("janitor_stopped")
