"""Contact import endpoints."""
import os
from pathlib import Path

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from leadflow_api.deps import get_registry
from leadflow_core.ingest import SUPPORTED_SUFFIXES, detect_format, preview_records, read_columns
from leadflow_core.ingest.columns import missing_columns
from leadflow_core.jobs import BatchPolicy, JobRegistry
from leadflow_core.util import JobDispatchError, SourceError, generate_id
from leadflow_worker.tasks import IMPORT_KEY_COLUMN, build_import_job

router = APIRouter(prefix="/imports", tags=["imports"])
logger = structlog.get_logger()


async def _save_upload(request: Request, file: UploadFile) -> tuple[str, str]:
    """Store an upload under the upload dir; returns (path, detected format)."""
    settings = request.app.state.settings
    suffix = Path(file.filename or "").suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise HTTPException(
            status_code=400, detail="Please upload an Excel (.xlsx), CSV or TSV file"
        )
    max_bytes = settings.max_upload_mb * 1024 * 1024
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Please select a file to upload")
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=413, detail=f"File too large (max {settings.max_upload_mb} MB)"
        )

    os.makedirs(settings.upload_dir, exist_ok=True)
    save_path = os.path.join(settings.upload_dir, f"{generate_id()}{suffix}")
    with open(save_path, "wb") as f:
        f.write(content)

    detected = detect_format(save_path)
    if not detected:
        os.remove(save_path)
        raise HTTPException(
            status_code=400, detail="Unsupported or unrecognized file format"
        )
    return save_path, detected


@router.post("/preview")
async def import_preview(request: Request, file: UploadFile = File(...)):
    """Show the header and first rows of a file without importing it."""
    path, detected = await _save_upload(request, file)
    try:
        columns = read_columns(path, detected)
        preview = preview_records(path, detected, max_rows=10)
    except SourceError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    finally:
        os.remove(path)
    return {
        "detected_format": detected,
        "columns": columns,
        "missing_required_columns": missing_columns(columns, [IMPORT_KEY_COLUMN]),
        "preview_records": preview,
    }


@router.post("")
async def create_import(
    request: Request,
    file: UploadFile = File(...),
    registry: JobRegistry = Depends(get_registry),
):
    """Start importing contacts from an uploaded file."""
    settings = request.app.state.settings
    path, detected = await _save_upload(request, file)
    definition = build_import_job(
        path,
        detected,
        policy=BatchPolicy(
            size=settings.import_batch_size,
            delay_seconds=settings.import_batch_delay_seconds,
        ),
        filename=file.filename,
    )
    try:
        job_id = registry.submit(definition)
    except JobDispatchError as e:
        logger.warning("import_dispatch_refused", error=str(e))
        raise HTTPException(status_code=503, detail=str(e)) from e
    return {"job_id": job_id}
