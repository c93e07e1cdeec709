"""
Upload intake: accepts a file, stores it and registers a pending job.
"""

import time
from pathlib import Path
from uuid import uuid4

from src.batch.executor import JobExecutor
from src.batch.readers import SUPPORTED_EXTENSIONS, file_type_for
from src.core.exceptions import JobNotFoundError, UploadRejectedError
from src.core.models import JobError, ValidationJob
from src.core.settings import DEFAULT_MAX_UPLOAD_BYTES
from src.observability.logger import get_logger
from src.warehouse.store import JobErrorStore, JobStore

logger = get_logger(__name__)


class UploadService:
    """
    Entry point for uploads and job queries.
    """

    def __init__(
        self,
        jobs: JobStore,
        job_errors: JobErrorStore,
        executor: JobExecutor | None,
        upload_dir: str | Path = "./uploads",
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    ):
        """
        Args:
            jobs: Job store
            job_errors: Store holding per-row issues
            executor: Background executor; None leaves jobs pending for the caller to run
            upload_dir: Directory uploads are written to
            max_upload_bytes: Largest accepted file
        """
        self.jobs = jobs
        self.job_errors = job_errors
        self.executor = executor
        self.upload_dir = Path(upload_dir)
        self.max_upload_bytes = max_upload_bytes

    def check(self, file_name: str | None, size: int) -> str:
        """
        Reject uploads that cannot be processed.

        Returns:
            The lower-cased file extension

        Raises:
            UploadRejectedError: On a missing name, empty or oversized file, or unsupported type
        """
        if not file_name:
            raise UploadRejectedError("No file uploaded")

        extension = Path(file_name).suffix.lower()
        if extension not in SUPPORTED_EXTENSIONS:
            raise UploadRejectedError("Invalid file type. Only CSV and Excel files are allowed.")
        if size == 0:
            raise UploadRejectedError("Uploaded file is empty")
        if size > self.max_upload_bytes:
            raise UploadRejectedError(
                f"File too large: {size} bytes exceeds the {self.max_upload_bytes} byte limit"
            )
        return extension

    def store_file(self, file_name: str, content: bytes) -> Path:
        """Write an upload under a unique name and return its path."""
        extension = self.check(file_name, len(content))
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        path = self.upload_dir / f"{int(time.time() * 1000)}-{uuid4().hex}{extension}"
        path.write_bytes(content)
        return path

    def accept(self, file_name: str | None, content: bytes, actor_id: str) -> ValidationJob:
        """
        Store an upload, create its pending job and queue it.

        Returns:
            The pending ValidationJob

        Raises:
            UploadRejectedError: If the upload fails the intake checks
        """
        path = self.store_file(file_name, content)

        job = self.jobs.create(ValidationJob(
            file_name=file_name,
            file_path=str(path),
            file_type=file_type_for(path),
            created_by=actor_id,
        ))
        logger.info(
            f"Accepted upload {file_name} as job {job.id}",
            extra={"job_id": job.id, "file_name": file_name, "size_bytes": len(content), "actor_id": actor_id},
        )

        if self.executor is not None:
            self.executor.submit(job.id)
        return job

    def status(self, job_id: str) -> ValidationJob:
        """
        Raises:
            JobNotFoundError: If the job does not exist
        """
        job = self.jobs.find(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def report(self, job_id: str) -> tuple[ValidationJob, list[JobError]]:
        """Job plus its issues ordered by row number."""
        job = self.status(job_id)
        return job, self.job_errors.list_for_job(job_id)
