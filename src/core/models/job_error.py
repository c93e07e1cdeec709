"""
JobError model: a stored per-row issue belonging to a validation job.
"""

from datetime import datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

from .record_result import FieldIssue
from .validation_job import utcnow


class JobError(BaseModel):
    """
    Persisted error or warning for one field of one row.

    Attributes:
        id: Issue identifier
        job_id: Owning validation job
        row_number: Row the issue was raised on
        field_name: Field the issue belongs to
        error_type: "error" or "warning"
        error_message: Description of the issue
        current_value: Value found in the file
        suggested_value: Advisory correction
        created_at: When the issue was recorded
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    job_id: str
    row_number: int
    field_name: str
    error_type: Literal["error", "warning"]
    error_message: str
    current_value: str | None = None
    suggested_value: str | None = None
    created_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def from_issue(cls, job_id: str, issue: FieldIssue) -> "JobError":
        return cls(
            job_id=job_id,
            row_number=issue.row,
            field_name=issue.field,
            error_type=issue.severity,
            error_message=issue.message,
            current_value=issue.current,
            suggested_value=issue.suggested,
        )
