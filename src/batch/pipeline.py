"""
Validation job orchestration.

Coordinates the flow: normalize -> classify -> import valid rows -> record issues
-> finalize counters, and drives the job state machine
pending -> processing -> completed | failed.
"""

import time
from pathlib import Path

from pydantic import BaseModel, Field

from src.batch.readers import FileNormalizer
from src.core.classifier import RecordClassifier
from src.core.exceptions import JobNotFoundError, ParseError, UnsupportedFormatError
from src.core.models import FieldIssue, JobError, RawRecord, RecordResult, ValidationJob
from src.observability import metrics
from src.observability.logger import get_logger, log_operation
from src.services.provider_service import ProviderService
from src.warehouse.store import JobErrorStore, JobStore

logger = get_logger(__name__)


class ValidationSummary(BaseModel):
    """
    Outcome of running the classifier (and optionally the import) over a file.

    Attributes:
        total_records: Rows seen
        valid_records: Rows that passed (and, on import, were persisted)
        invalid_records: Rows with at least one error
        warning_records: Rows with at least one warning
        warnings_count: Warning issues across all rows
        errors: All error issues, in row order
        warnings: All warning issues, in row order
        results: Per-row results, in row order
    """

    total_records: int = 0
    valid_records: int = 0
    invalid_records: int = 0
    warning_records: int = 0
    warnings_count: int = 0
    errors: list[FieldIssue] = Field(default_factory=list)
    warnings: list[FieldIssue] = Field(default_factory=list)
    results: list[RecordResult] = Field(default_factory=list)


class JobOrchestrator:
    """
    Runs one validation job to a terminal state.

    The orchestrator never raises out of run(): parse failures and unexpected
    faults fail the job, per-record problems are data outcomes.
    """

    def __init__(
        self,
        jobs: JobStore,
        job_errors: JobErrorStore,
        providers: ProviderService,
        classifier: RecordClassifier | None = None,
        normalizer: FileNormalizer | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            jobs: Job store (compare-and-set transitions)
            job_errors: Store for per-row issues
            providers: Write path for imported providers
            classifier: Record classifier (defaults to built-in reference data)
            normalizer: File normalizer
        """
        self.jobs = jobs
        self.job_errors = job_errors
        self.providers = providers
        self.classifier = classifier or RecordClassifier()
        self.normalizer = normalizer or FileNormalizer()

    def run(self, job_id: str) -> ValidationJob:
        """
        Process a pending job.

        A job that is no longer pending (already picked up, or retried after
        finishing) is left untouched and returned as stored.

        Raises:
            JobNotFoundError: If the job does not exist
        """
        job = self.jobs.find(job_id)
        if job is None:
            raise JobNotFoundError(job_id)

        if job.status != "pending":
            logger.warning(f"Job {job_id} is already {job.status}; skipping", extra={"job_id": job_id})
            return job

        started = job.start()
        if not self.jobs.transition(job_id, "pending", started):
            logger.warning(f"Job {job_id} was picked up by another worker", extra={"job_id": job_id})
            return self.jobs.find(job_id)

        logger.info(f"Job {job_id} processing {job.file_name}", extra={"job_id": job_id})
        start_time = time.time()

        try:
            with log_operation("Validating upload", logger=logger, job_id=job_id):
                records = self.normalizer.read(job.file_path, job.file_type)
                summary = self.import_records(job_id, records, job.created_by)
        except (ParseError, UnsupportedFormatError) as e:
            return self._finish(started.fail(str(e)), start_time)
        except Exception as e:
            logger.exception(f"Job {job_id} aborted by unexpected error", extra={"job_id": job_id})
            return self._finish(started.fail(f"Unexpected error: {e}"), start_time)

        finished = started.complete(
            total_records=summary.total_records,
            valid_records=summary.valid_records,
            invalid_records=summary.invalid_records,
            warnings_count=summary.warnings_count,
        )
        return self._finish(finished, start_time)

    def _finish(self, job: ValidationJob, start_time: float) -> ValidationJob:
        if not self.jobs.transition(job.id, "processing", job):
            logger.warning(
                f"Job {job.id} was already finalized; dropping duplicate '{job.status}' transition",
                extra={"job_id": job.id},
            )
            return self.jobs.find(job.id)

        duration = time.time() - start_time
        metrics.record_job_finished(
            job.status, job.total_records, job.valid_records, job.invalid_records, duration
        )
        logger.info(
            f"Job {job.id} {job.status}",
            extra={
                "job_id": job.id,
                "status": job.status,
                "total_records": job.total_records,
                "valid_records": job.valid_records,
                "invalid_records": job.invalid_records,
                "warnings_count": job.warnings_count,
                "failure_reason": job.failure_reason,
            },
        )
        return job

    def import_records(self, job_id: str, records: list[RawRecord], actor_id: str) -> ValidationSummary:
        """
        Classify records in parallel, then persist valid ones one at a time.

        A record whose provider write fails is counted as invalid and gets a
        "persistence" error in the report; the remaining records continue.
        """
        results = self.classifier.classify_batch(records)
        summary = self._summarize(results)

        persisted = 0
        for record, result in zip(records, results):
            if not result.is_valid:
                continue
            try:
                self.providers.import_record(record, actor_id)
                persisted += 1
            except Exception as e:
                logger.error(
                    f"Failed to import row {record.row_number}: {e}",
                    extra={"job_id": job_id, "row": record.row_number},
                )
                summary.errors.append(FieldIssue(
                    row=record.row_number,
                    field="persistence",
                    message=f"Failed to import provider: {e}",
                    severity="error",
                ))

        summary.invalid_records += summary.valid_records - persisted
        summary.valid_records = persisted

        issues = sorted([*summary.errors, *summary.warnings], key=lambda i: i.row)
        self.job_errors.add_many([JobError.from_issue(job_id, issue) for issue in issues])

        return summary

    def preview(self, file_path: str | Path, file_type: str | None = None) -> ValidationSummary:
        """
        Validate a file without creating a job or persisting anything.

        Raises:
            UnsupportedFormatError: If the extension is not supported
            ParseError: If the file is structurally corrupt
        """
        records = self.normalizer.read(file_path, file_type)
        return self._summarize(self.classifier.classify_batch(records))

    def _summarize(self, results: list[RecordResult]) -> ValidationSummary:
        summary = ValidationSummary(total_records=len(results), results=results)
        for result in results:
            if result.is_valid:
                summary.valid_records += 1
            else:
                summary.invalid_records += 1
            if result.has_warnings:
                summary.warning_records += 1
            summary.errors.extend(result.errors)
            summary.warnings.extend(result.warnings)

        summary.warnings_count = len(summary.warnings)
        for issue in [*summary.errors, *summary.warnings]:
            metrics.record_field_issue(issue.field, issue.severity)
        return summary
