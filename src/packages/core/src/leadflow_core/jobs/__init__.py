"""Bulk job engine."""
from leadflow_core.jobs.models import JobKind, JobState, JobStatus, MAX_RECENT_ERRORS
from leadflow_core.jobs.outcomes import Accept, Skip, RecordError, Succeeded
from leadflow_core.jobs.batching import BatchPolicy, Batcher
from leadflow_core.jobs.progress import ProgressTracker
from leadflow_core.jobs.runner import JobDefinition, run_job
from leadflow_core.jobs.registry import JobRegistry
from leadflow_core.jobs.janitor import Janitor

__all__ = [
    "JobKind",
    "JobState",
    "JobStatus",
    "MAX_RECENT_ERRORS",
    "Accept",
    "Skip",
    "RecordError",
    "Succeeded",
    "BatchPolicy",
    "Batcher",
    "ProgressTracker",
    "JobDefinition",
    "run_job",
    "JobRegistry",
    "Janitor",
]
