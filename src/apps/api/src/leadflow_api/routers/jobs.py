"""Job status endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from leadflow_api.deps import get_registry
from leadflow_core.jobs import JobRegistry, JobStatus

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _job_payload(job: JobStatus) -> dict:
    payload = job.model_dump(mode="json")
    payload["progress"] = round(job.progress, 2)
    if job.error_message is None:
        payload.pop("error_message")
    return payload


@router.get("")
def list_jobs(active_only: bool = False, registry: JobRegistry = Depends(get_registry)):
    """List jobs. If active_only=true, returns only preparing/processing jobs."""
    jobs = registry.list_jobs(active_only=active_only, limit=50)
    return {"jobs": [_job_payload(j) for j in jobs]}


@router.get("/{job_id}")
def get_job_status(job_id: str, registry: JobRegistry = Depends(get_registry)):
    """Get job status."""
    job = registry.lookup(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return _job_payload(job)


@router.post("/{job_id}/cancel")
def cancel_job(job_id: str, registry: JobRegistry = Depends(get_registry)):
    """Cancel a preparing or processing job."""
    if not registry.cancel(job_id):
        job = registry.lookup(job_id)
        if job is None:
            raise HTTPException(status_code=404, detail="Job not found")
        raise HTTPException(
            status_code=400,
            detail=f"Job cannot be cancelled (status: {job.status.value})",
        )
    return {"job_id": job_id, "status": "cancelling"}
