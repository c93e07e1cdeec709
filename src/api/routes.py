"""
HTTP routes for uploads, job status and reports.
"""

import asyncio
import os
import tempfile
from pathlib import Path

from fastapi import APIRouter, Depends, File, Header, HTTPException, Request, UploadFile
from fastapi.responses import Response

from src.batch.pipeline import ValidationSummary
from src.core.exceptions import JobNotFoundError, ParseError, UnsupportedFormatError, UploadRejectedError
from src.observability import metrics
from src.observability.logger import get_logger
from src.services.application import Application

logger = get_logger(__name__)

JOB_NOT_FOUND = "Validation job not found"

router = APIRouter(prefix="/api/validation", tags=["Validation"])
health_router = APIRouter(tags=["Health"])


def get_application(request: Request) -> Application:
    return request.app.state.application


async def _read_upload(file: UploadFile | None) -> tuple[str | None, bytes]:
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    return file.filename, await file.read()


@router.post("/upload", status_code=201)
async def upload_file(
    file: UploadFile | None = File(None),
    x_user_id: str = Header("anonymous"),
    application: Application = Depends(get_application),
):
    """Store an upload and queue its validation job."""
    file_name, content = await _read_upload(file)
    loop = asyncio.get_running_loop()
    try:
        job = await loop.run_in_executor(
            None,
            lambda: application.uploads.accept(file_name, content, actor_id=x_user_id),
        )
    except UploadRejectedError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "message": "File uploaded successfully. Validation in progress.",
        "jobId": job.id,
        "fileName": job.file_name,
    }


@router.get("/status/{job_id}")
def job_status(job_id: str, application: Application = Depends(get_application)):
    try:
        job = application.uploads.status(job_id)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail=JOB_NOT_FOUND)
    return {"job": job.model_dump(mode="json")}


@router.get("/report/{job_id}")
def job_report(job_id: str, application: Application = Depends(get_application)):
    """Job plus every recorded error and warning, ordered by row."""
    try:
        job, errors = application.uploads.report(job_id)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail=JOB_NOT_FOUND)
    return {
        "job": job.model_dump(mode="json"),
        "errors": [error.model_dump(mode="json") for error in errors],
    }


def _preview_content(application: Application, extension: str, content: bytes) -> ValidationSummary:
    """Write the upload to a temporary file and validate it (blocking)."""
    fd, temp_path = tempfile.mkstemp(suffix=extension)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
        return application.orchestrator.preview(Path(temp_path))
    finally:
        Path(temp_path).unlink(missing_ok=True)


@router.post("/preview")
async def preview_file(
    file: UploadFile | None = File(None),
    application: Application = Depends(get_application),
):
    """Validate a file without creating a job or importing providers."""
    file_name, content = await _read_upload(file)
    try:
        extension = application.uploads.check(file_name, len(content))
    except UploadRejectedError as e:
        raise HTTPException(status_code=400, detail=str(e))

    loop = asyncio.get_running_loop()
    try:
        summary = await loop.run_in_executor(
            None, _preview_content, application, extension, content
        )
    except (ParseError, UnsupportedFormatError) as e:
        logger.warning(f"Preview of {file_name} failed: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "totalRecords": summary.total_records,
        "validRecords": summary.valid_records,
        "invalidRecords": summary.invalid_records,
        "warningRecords": summary.warning_records,
        "errors": [issue.model_dump() for issue in summary.errors],
        "warnings": [issue.model_dump() for issue in summary.warnings],
        "allRecords": [result.model_dump() for result in summary.results],
    }


@health_router.get("/health")
def health(application: Application = Depends(get_application)):
    return {
        "status": "healthy",
        "store_backend": application.settings.store_backend,
        "validators": application.orchestrator.classifier.get_rule_summary()["fields"],
    }


@health_router.get("/metrics")
def prometheus_metrics():
    if not metrics.metrics_enabled():
        raise HTTPException(status_code=404, detail="Metrics are disabled")
    return Response(content=metrics.generate_metrics(), media_type=metrics.get_content_type())
