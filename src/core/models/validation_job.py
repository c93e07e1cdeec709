"""
ValidationJob model tracking one asynchronous run of the pipeline over one file.
"""

from datetime import datetime, timezone
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

from src.core.exceptions import InvalidJobTransitionError

JobStatus = Literal["pending", "processing", "completed", "failed"]

TERMINAL_STATUSES: frozenset[str] = frozenset({"completed", "failed"})

# Allowed forward moves; anything else is rejected.
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset({"processing"}),
    "processing": frozenset({"completed", "failed"}),
    "completed": frozenset(),
    "failed": frozenset(),
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ValidationJob(BaseModel):
    """
    Lifecycle record of one upload.

    State machine: pending -> processing -> completed | failed.
    Counters are written once, at completion.

    Attributes:
        id: Job identifier
        file_name: Original name of the uploaded file
        file_path: Where the stored upload lives
        file_type: "csv" or "xlsx" (xls files are reported as "xlsx")
        status: Current lifecycle state
        total_records: Rows seen in the file
        valid_records: Rows imported as providers
        invalid_records: Rows rejected (validation or persistence failure)
        warnings_count: Number of warning issues raised across all rows
        failure_reason: Why the job failed, when it did
        created_at / started_at / completed_at: Lifecycle timestamps
        created_by: Actor that uploaded the file
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    file_name: str = Field(..., min_length=1)
    file_path: str
    file_type: Literal["csv", "xlsx"] = "csv"
    status: JobStatus = "pending"
    total_records: int = Field(0, ge=0)
    valid_records: int = Field(0, ge=0)
    invalid_records: int = Field(0, ge=0)
    warnings_count: int = Field(0, ge=0)
    failure_reason: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    started_at: datetime | None = None
    completed_at: datetime | None = None
    created_by: str

    class Config:
        json_schema_extra = {
            "example": {
                "id": "5f0c7c1e-8a43-4ab8-9a38-1c3b0d5e2f10",
                "file_name": "providers_march.csv",
                "file_path": "uploads/1710000000000-5f0c7c1e.csv",
                "file_type": "csv",
                "status": "completed",
                "total_records": 120,
                "valid_records": 113,
                "invalid_records": 7,
                "warnings_count": 15,
                "created_by": "user-42",
            }
        }

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def _check_transition(self, target: str) -> None:
        if target not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidJobTransitionError(self.id, self.status, target)

    def start(self) -> "ValidationJob":
        """Return a copy moved to processing."""
        self._check_transition("processing")
        return self.model_copy(update={"status": "processing", "started_at": utcnow()})

    def complete(
        self,
        total_records: int,
        valid_records: int,
        invalid_records: int,
        warnings_count: int,
    ) -> "ValidationJob":
        """Return a copy moved to completed with its final counters."""
        self._check_transition("completed")
        if total_records != valid_records + invalid_records:
            raise ValueError(
                f"total_records ({total_records}) must equal valid ({valid_records}) "
                f"+ invalid ({invalid_records})"
            )
        return self.model_copy(
            update={
                "status": "completed",
                "completed_at": utcnow(),
                "total_records": total_records,
                "valid_records": valid_records,
                "invalid_records": invalid_records,
                "warnings_count": warnings_count,
            }
        )

    def fail(self, reason: str) -> "ValidationJob":
        """Return a copy moved to failed."""
        self._check_transition("failed")
        return self.model_copy(
            update={"status": "failed", "completed_at": utcnow(), "failure_reason": reason}
        )
