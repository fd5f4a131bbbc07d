"""Live progress counters for a single job."""
import threading
from datetime import datetime
from typing import Any, Callable

import structlog

from leadflow_core.jobs.models import (
    MAX_RECENT_ERRORS,
    JobKind,
    JobState,
    JobStatus,
)
from leadflow_core.util.errors import JobStateError
from leadflow_core.util.time import utc_now

logger = structlog.get_logger()


class ProgressTracker:
    """Counter set for one job.

    Only the job's own runner writes to a tracker; any number of threads may
    call :meth:`snapshot` at the same time. Every read and write goes through
    one lock so a snapshot never observes a half-applied update, and
    ``processed == succeeded + errored + skipped`` holds in every snapshot.

    ``recent_errors`` keeps the first ``MAX_RECENT_ERRORS`` messages and then
    stops collecting.
    """

    def __init__(
        self,
        job_id: str,
        kind: JobKind | str,
        meta: dict[str, Any] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.job_id = job_id
        self.kind = JobKind(kind)
        self._meta = dict(meta or {})
        self._clock = clock
        self._lock = threading.Lock()
        self._status = JobState.PREPARING
        self._total = 0
        self._processed = 0
        self._succeeded = 0
        self._errored = 0
        self._skipped = 0
        self._recent_errors: list[str] = []
        self._error_message: str | None = None
        self._started_at = clock()
        self._ended_at: datetime | None = None

    @property
    def status(self) -> JobState:
        with self._lock:
            return self._status

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def ended_at(self) -> datetime | None:
        with self._lock:
            return self._ended_at

    def _require(self, *allowed: JobState) -> None:
        if self._status not in allowed:
            raise JobStateError(
                f"Job {self.job_id} is {self._status.value}; expected "
                + " or ".join(s.value for s in allowed)
            )

    def _count(self) -> None:
        if self._processed >= self._total:
            raise JobStateError(
                f"Job {self.job_id} already processed all {self._total} records"
            )
        self._processed += 1

    def begin_processing(self, total: int) -> None:
        """Fix the record count and move to processing."""
        if total < 0:
            raise ValueError("total must be non-negative")
        with self._lock:
            self._require(JobState.PREPARING)
            self._total = total
            self._status = JobState.PROCESSING

    def increment_succeeded(self) -> None:
        with self._lock:
            self._require(JobState.PROCESSING)
            self._count()
            self._succeeded += 1

    def increment_errored(self, reason: str) -> None:
        with self._lock:
            self._require(JobState.PROCESSING)
            self._count()
            self._errored += 1
            if len(self._recent_errors) < MAX_RECENT_ERRORS:
                self._recent_errors.append(reason)

    def increment_skipped(self, reason: str | None = None) -> None:
        with self._lock:
            self._require(JobState.PROCESSING)
            self._count()
            self._skipped += 1
        if reason:
            logger.debug("record_skipped", job_id=self.job_id, reason=reason)

    def complete(self) -> None:
        with self._lock:
            self._require(JobState.PROCESSING)
            self._status = JobState.COMPLETED
            self._ended_at = self._clock()

    def fail(self, message: str) -> None:
        with self._lock:
            self._require(JobState.PREPARING, JobState.PROCESSING)
            self._status = JobState.FAILED
            self._error_message = message or "Job failed"
            self._ended_at = self._clock()

    def cancel(self) -> None:
        with self._lock:
            self._require(JobState.PREPARING, JobState.PROCESSING)
            self._status = JobState.CANCELLED
            self._ended_at = self._clock()

    def snapshot(self) -> JobStatus:
        """Copy the current state into an immutable :class:`JobStatus`."""
        with self._lock:
            progress = (
                self._processed / self._total * 100 if self._total else 0.0
            )
            return JobStatus(
                job_id=self.job_id,
                kind=self.kind,
                status=self._status,
                total=self._total,
                processed=self._processed,
                succeeded=self._succeeded,
                errored=self._errored,
                skipped=self._skipped,
                progress=progress,
                recent_errors=tuple(self._recent_errors),
                error_message=self._error_message,
                meta=dict(self._meta),
                started_at=self._started_at,
                ended_at=self._ended_at,
            )
