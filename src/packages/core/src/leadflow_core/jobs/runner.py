"""Runs one job end to end on a background thread."""
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

import structlog

from leadflow_core.jobs.batching import Batcher, BatchPolicy
from leadflow_core.jobs.models import JobKind
from leadflow_core.jobs.outcomes import (
    Accept,
    FlushOutcome,
    Outcome,
    RecordError,
    Skip,
    Succeeded,
)
from leadflow_core.jobs.progress import ProgressTracker
from leadflow_core.util.errors import FatalJobError

logger = structlog.get_logger()


@dataclass
class JobDefinition:
    """Everything the runner needs to know about one kind of bulk job.

    ``load`` enumerates the whole input; it runs on the worker thread and any
    exception it raises fails the job before processing starts. ``classify``
    maps one record to an :class:`Accept`, :class:`Skip` or
    :class:`RecordError`. ``flush`` receives a list of accepted items and
    returns one outcome per item. ``on_finish`` always runs last.
    """

    kind: JobKind
    load: Callable[[], Sequence[Any]]
    classify: Callable[[Any, int], Outcome]
    flush: Callable[[list[Any]], Sequence[FlushOutcome]]
    policy: BatchPolicy = field(default_factory=BatchPolicy)
    on_finish: Callable[[], None] | None = None
    meta: dict[str, Any] = field(default_factory=dict)


def _apply(tracker: ProgressTracker, outcome: Skip | RecordError | Succeeded) -> None:
    if isinstance(outcome, Succeeded):
        tracker.increment_succeeded()
    elif isinstance(outcome, Skip):
        tracker.increment_skipped(outcome.reason)
    elif isinstance(outcome, RecordError):
        tracker.increment_errored(outcome.reason)
    else:
        raise TypeError(f"Unexpected outcome: {outcome!r}")


def _classify(definition: JobDefinition, record: Any, index: int) -> Outcome:
    try:
        return definition.classify(record, index)
    except FatalJobError:
        raise
    except Exception as e:
        return RecordError(str(e) or e.__class__.__name__)


def run_job(
    tracker: ProgressTracker,
    definition: JobDefinition,
    cancel_event: threading.Event | None = None,
    sleep: Callable[[float], Any] | None = None,
) -> None:
    """Run a job to a terminal state.

    Record-level problems are counted on the tracker and never raised. Any
    other exception fails the job; outcomes recorded before it are kept.
    """
    cancel_event = cancel_event or threading.Event()
    log = logger.bind(job_id=tracker.job_id, kind=tracker.kind.value)
    log.info("job_started")
    try:
        try:
            records = list(definition.load())
        except Exception as e:
            tracker.fail(str(e) or e.__class__.__name__)
            log.warning("job_failed", stage="load", error=str(e))
            return

        if cancel_event.is_set():
            tracker.cancel()
            log.info("job_cancelled", processed=0)
            return

        tracker.begin_processing(len(records))
        log.info("job_processing", total=len(records))

        def on_flushed(batch, results):
            for result in results:
                _apply(tracker, result)

        batcher = Batcher(
            definition.policy,
            definition.flush,
            on_flushed,
            sleep=sleep or cancel_event.wait,
            should_stop=cancel_event.is_set,
        )
        for index, record in enumerate(records):
            if cancel_event.is_set():
                tracker.cancel()
                log.info("job_cancelled", processed=tracker.snapshot().processed)
                return
            outcome = _classify(definition, record, index)
            if isinstance(outcome, Accept):
                if not batcher.add(outcome.item):
                    tracker.cancel()
                    log.info("job_cancelled", processed=tracker.snapshot().processed)
                    return
            else:
                _apply(tracker, outcome)
        batcher.close()

        tracker.complete()
        snap = tracker.snapshot()
        log.info(
            "job_completed",
            total=snap.total,
            succeeded=snap.succeeded,
            errored=snap.errored,
            skipped=snap.skipped,
            batches=batcher.flush_count,
        )
    except Exception as e:
        log.exception("job_failed", error=str(e))
        if not tracker.is_terminal:
            tracker.fail(str(e) or e.__class__.__name__)
    finally:
        if definition.on_finish is not None:
            try:
                definition.on_finish()
            except Exception as e:
                log.warning("job_cleanup_failed", error=str(e))
