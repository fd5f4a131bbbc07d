"""Clock helpers."""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime; the default clock for trackers."""
    return datetime.now(timezone.utc)
