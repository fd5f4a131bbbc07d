"""Health check endpoint."""
from fastapi import APIRouter, Depends

from leadflow_api.deps import get_registry
from leadflow_core.jobs import JobRegistry

router = APIRouter(tags=["health"])


@router.get("/health")
def health(registry: JobRegistry = Depends(get_registry)):
    """Health check."""
    return {"status": "ok", "active_jobs": len(registry.list_jobs(active_only=True))}
