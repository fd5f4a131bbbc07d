"""Error types shared across the job engine."""


class LeadflowError(Exception):
    """Base class for errors raised by leadflow."""


class SourceError(LeadflowError):
    """The input for a job could not be read or enumerated."""


class FatalJobError(LeadflowError):
    """A fault that aborts the whole job rather than a single record."""


class StoreUnavailableError(FatalJobError):
    """The contact store could not be read or written."""


class JobDispatchError(LeadflowError):
    """A job could not be handed to a background worker."""


class JobStateError(LeadflowError):
    """A tracker was mutated in a way its lifecycle does not allow."""
