"""Per-record outcomes produced by classifiers and batch flushes."""
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Accept:
    """Record passed every check and joins the current batch."""

    item: Any


@dataclass(frozen=True)
class Skip:
    """Record is valid but excluded by policy (duplicate, opted out)."""

    reason: str | None = None


@dataclass(frozen=True)
class RecordError:
    """Record is malformed or its downstream call failed."""

    reason: str


@dataclass(frozen=True)
class Succeeded:
    """Record was written or delivered by a batch flush."""

    item: Any = None


Outcome = Union[Accept, Skip, RecordError]
FlushOutcome = Union[Succeeded, Skip, RecordError]
