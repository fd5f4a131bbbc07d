"""Job models."""
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class JobKind(str, Enum):
    """What a job does with its records."""

    IMPORT = "import"
    EMAIL = "email"
    SMS = "sms"


class JobState(str, Enum):
    """Lifecycle of a job: preparing -> processing -> a terminal state."""

    PREPARING = "preparing"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset({JobState.COMPLETED, JobState.FAILED, JobState.CANCELLED})

MAX_RECENT_ERRORS = 10


class JobStatus(BaseModel):
    """Point-in-time copy of a job's progress, safe to hand to any thread."""

    model_config = ConfigDict(frozen=True)

    job_id: str
    kind: JobKind
    status: JobState
    total: int
    processed: int
    succeeded: int
    errored: int
    skipped: int
    progress: float
    recent_errors: tuple[str, ...] = ()
    error_message: str | None = None
    meta: dict[str, Any] = Field(default_factory=dict)
    started_at: datetime
    ended_at: datetime | None = None
