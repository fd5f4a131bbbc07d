"""FastAPI application entrypoint."""
import os
from datetime import timedelta

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from leadflow_api.logging import configure_logging
from leadflow_api.routers import health, imports, campaigns, jobs
from leadflow_api.settings import Settings, get_settings
from leadflow_core.contacts import init_db
from leadflow_core.jobs import Janitor, JobRegistry

logger = structlog.get_logger()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app; the job registry and janitor live on ``app.state``."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(title="Leadflow Bulk Jobs API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, prefix="/api")
    app.include_router(imports.router, prefix="/api")
    app.include_router(campaigns.router, prefix="/api")
    app.include_router(jobs.router, prefix="/api")

    app.state.settings = settings
    app.state.registry = JobRegistry(
        retention=timedelta(hours=settings.job_retention_hours),
        max_active_jobs=settings.max_active_jobs,
    )
    app.state.janitor = Janitor(app.state.registry, settings.janitor_interval_seconds)

    @app.on_event("startup")
    def startup():
        """Initialize on startup."""
        os.environ.setdefault("SQLITE_PATH", settings.sqlite_path)
        logger.info("initializing_database", path=os.environ["SQLITE_PATH"])
        init_db()
        app.state.janitor.start()

    @app.on_event("shutdown")
    def shutdown():
        app.state.janitor.stop()
        app.state.registry.shutdown()

    return app


app = create_app()
