"""API settings."""
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    sqlite_path: str = "/data/contacts.db"
    max_upload_mb: int = 50
    upload_dir: str = "/tmp/uploads"
    import_batch_size: int = 500
    import_batch_delay_seconds: float = 0.0
    send_batch_size: int = 50
    send_batch_delay_seconds: float = 1.0
    job_retention_hours: float = 24.0
    janitor_interval_seconds: float = 3600.0
    max_active_jobs: int | None = None
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings."""
    return Settings()
