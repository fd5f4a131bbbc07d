"""Utility modules."""
from leadflow_core.util.ids import generate_id, short_id
from leadflow_core.util.time import utc_now
from leadflow_core.util.errors import (
    LeadflowError,
    SourceError,
    FatalJobError,
    StoreUnavailableError,
    JobDispatchError,
    JobStateError,
)

__all__ = [
    "generate_id",
    "short_id",
    "utc_now",
    "LeadflowError",
    "SourceError",
    "FatalJobError",
    "StoreUnavailableError",
    "JobDispatchError",
    "JobStateError",
]
