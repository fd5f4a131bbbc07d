"""Fixed-size batching with a fixed pause between flushes."""
import time
from dataclasses import dataclass
from typing import Any, Callable, Sequence

import structlog

from leadflow_core.jobs.outcomes import FlushOutcome

logger = structlog.get_logger()


@dataclass(frozen=True)
class BatchPolicy:
    """How many accepted records go downstream at once, and the pause after."""

    size: int = 50
    delay_seconds: float = 1.0

    def __post_init__(self):
        if self.size < 1:
            raise ValueError("batch size must be at least 1")
        if self.delay_seconds < 0:
            raise ValueError("batch delay must be non-negative")


class Batcher:
    """Groups accepted items and flushes them as a unit.

    The pause owed after a flush is taken just before the next item is
    accepted, so the final flush of a job is never followed by a pause:
    120 items at size 50 flush as 50, 50, 20 with two pauses in between.
    """

    def __init__(
        self,
        policy: BatchPolicy,
        flush: Callable[[list[Any]], Sequence[FlushOutcome]],
        on_flushed: Callable[[list[Any], Sequence[FlushOutcome]], None],
        sleep: Callable[[float], Any] = time.sleep,
        should_stop: Callable[[], bool] = lambda: False,
    ):
        self.policy = policy
        self._flush_fn = flush
        self._on_flushed = on_flushed
        self._sleep = sleep
        self._should_stop = should_stop
        self._items: list[Any] = []
        self._pause_pending = False
        self.flush_count = 0
        self.pause_count = 0

    def __len__(self) -> int:
        return len(self._items)

    def add(self, item: Any) -> bool:
        """Queue an item, flushing when the group is full.

        Returns False, leaving the item out, when a stop was requested during
        the pause owed before it.
        """
        if self._pause_pending:
            self._pause()
            if self._should_stop():
                return False
        self._items.append(item)
        if len(self._items) >= self.policy.size:
            self._flush()
        return True

    def close(self) -> None:
        """Flush whatever is left; no pause follows."""
        if not self._items:
            return
        self._flush()
        self._pause_pending = False

    def _pause(self) -> None:
        self._pause_pending = False
        self.pause_count += 1
        self._sleep(self.policy.delay_seconds)

    def _flush(self) -> None:
        batch, self._items = self._items, []
        results = list(self._flush_fn(batch))
        if len(results) != len(batch):
            raise ValueError(
                f"Batch flush returned {len(results)} outcomes for {len(batch)} records"
            )
        self.flush_count += 1
        self._on_flushed(batch, results)
        self._pause_pending = self.policy.delay_seconds > 0
        logger.debug("batch_flushed", size=len(batch), flush=self.flush_count)
