"""Job ID helpers."""
import uuid


def generate_id() -> str:
    return str(uuid.uuid4())


def short_id(job_id: str) -> str:
    """First block of a UUID, enough to tell jobs apart in thread names."""
    return job_id.split("-", 1)[0]
