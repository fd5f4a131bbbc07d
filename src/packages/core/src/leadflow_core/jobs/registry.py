"""In-memory job registry."""
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable

import structlog

from leadflow_core.jobs.models import JobStatus
from leadflow_core.jobs.progress import ProgressTracker
from leadflow_core.jobs.runner import JobDefinition, run_job
from leadflow_core.util.errors import JobDispatchError
from leadflow_core.util.ids import generate_id, short_id
from leadflow_core.util.time import utc_now

logger = structlog.get_logger()

DEFAULT_RETENTION = timedelta(hours=24)


@dataclass
class _Entry:
    tracker: ProgressTracker
    cancel_event: threading.Event
    thread: threading.Thread


class JobRegistry:
    """Maps job IDs to their progress trackers and runner threads.

    Submissions insert, pollers look up, and the janitor deletes; all three
    go through one lock. Jobs do not survive a restart.
    """

    def __init__(
        self,
        retention: timedelta = DEFAULT_RETENTION,
        max_active_jobs: int | None = None,
        clock: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], Any] | None = None,
    ):
        self.retention = retention
        self.max_active_jobs = max_active_jobs
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._jobs: dict[str, _Entry] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def __contains__(self, job_id: str) -> bool:
        with self._lock:
            return job_id in self._jobs

    def _active_count(self) -> int:
        return sum(1 for e in self._jobs.values() if not e.tracker.is_terminal)

    def submit(self, definition: JobDefinition) -> str:
        """Register a job and start its runner; returns without waiting on it."""
        job_id = generate_id()
        tracker = ProgressTracker(
            job_id, definition.kind, meta=definition.meta, clock=self._clock
        )
        cancel_event = threading.Event()
        thread = threading.Thread(
            target=run_job,
            args=(tracker, definition, cancel_event, self._sleep),
            name=f"job-{definition.kind.value}-{short_id(job_id)}",
            daemon=True,
        )
        with self._lock:
            if (
                self.max_active_jobs is not None
                and self._active_count() >= self.max_active_jobs
            ):
                self._discard(definition)
                raise JobDispatchError(
                    f"Too many jobs running (limit {self.max_active_jobs})"
                )
            self._jobs[job_id] = _Entry(tracker, cancel_event, thread)
        try:
            thread.start()
        except RuntimeError as e:
            with self._lock:
                self._jobs.pop(job_id, None)
            self._discard(definition)
            raise JobDispatchError(f"Could not start job: {e}") from e
        logger.info("job_submitted", job_id=job_id, kind=definition.kind.value)
        return job_id

    @staticmethod
    def _discard(definition: JobDefinition) -> None:
        if definition.on_finish is not None:
            try:
                definition.on_finish()
            except Exception as e:
                logger.warning("job_cleanup_failed", error=str(e))

    def lookup(self, job_id: str) -> JobStatus | None:
        """Get a snapshot of a job, or None if it is unknown or was pruned."""
        with self._lock:
            entry = self._jobs.get(job_id)
        if entry is None:
            return None
        return entry.tracker.snapshot()

    def list_jobs(self, active_only: bool = False, limit: int | None = None) -> list[JobStatus]:
        """List jobs, running ones first, then most recently started."""
        with self._lock:
            trackers = [e.tracker for e in self._jobs.values()]
        snaps = [t.snapshot() for t in trackers]
        if active_only:
            snaps = [s for s in snaps if not s.status.is_terminal]
        snaps.sort(key=lambda s: s.started_at, reverse=True)
        snaps.sort(key=lambda s: s.status.is_terminal)
        return snaps[:limit] if limit is not None else snaps

    def cancel(self, job_id: str) -> bool:
        """Ask a running job to stop. Returns False if unknown or already finished."""
        with self._lock:
            entry = self._jobs.get(job_id)
        if entry is None or entry.tracker.is_terminal:
            return False
        entry.cancel_event.set()
        logger.info("job_cancel_requested", job_id=job_id)
        return True

    def wait(self, job_id: str, timeout: float | None = None) -> JobStatus | None:
        """Block until a job's runner exits (or the timeout passes)."""
        with self._lock:
            entry = self._jobs.get(job_id)
        if entry is None:
            return None
        entry.thread.join(timeout)
        return entry.tracker.snapshot()

    def sweep(self, now: datetime | None = None) -> int:
        """Drop finished jobs whose end time is older than the retention window."""
        cutoff = (now or self._clock()) - self.retention
        with self._lock:
            expired = [
                job_id
                for job_id, e in self._jobs.items()
                if e.tracker.ended_at is not None and e.tracker.ended_at < cutoff
            ]
            for job_id in expired:
                del self._jobs[job_id]
        if expired:
            logger.info("jobs_pruned", count=len(expired), remaining=len(self))
        return len(expired)

    def shutdown(self, timeout: float = 5.0) -> None:
        """Cancel every running job and give the runners a moment to stop."""
        with self._lock:
            entries = list(self._jobs.values())
        for e in entries:
            if not e.tracker.is_terminal:
                e.cancel_event.set()
        for e in entries:
            if e.thread.is_alive():
                e.thread.join(timeout)
