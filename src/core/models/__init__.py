"""
Core data models for the provider validation pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .audit_entry import AuditAction, AuditEntry
from .job_error import JobError
from .provider_record import PROVIDER_FIELDS, ProviderRecord
from .raw_record import RawRecord
from .record_result import FieldIssue, RecordResult
from .validation_job import JobStatus, ValidationJob
from .validation_outcome import ValidationOutcome

__all__ = [
    "AuditAction",
    "AuditEntry",
    "FieldIssue",
    "JobError",
    "JobStatus",
    "PROVIDER_FIELDS",
    "ProviderRecord",
    "RawRecord",
    "RecordResult",
    "ValidationJob",
    "ValidationOutcome",
]
