"""
RecordResult model representing the classified outcome of one input row.
"""

from typing import Literal

from pydantic import BaseModel, Field, model_validator


class FieldIssue(BaseModel):
    """
    A single error or warning tied to one field of one row.

    Attributes:
        row: Row number of the owning record
        field: Field (or pseudo-field such as "completeness") the issue belongs to
        message: Human-readable description
        current: Raw value that was checked
        suggested: Advisory correction, if any
        severity: "error" blocks persistence, "warning" does not
    """

    row: int
    field: str
    message: str
    current: str | None = None
    suggested: str | None = None
    severity: Literal["error", "warning"] = "error"


class RecordResult(BaseModel):
    """
    Aggregated validation result for one RawRecord.

    Invariants:
        is_valid == (len(errors) == 0)
        has_warnings == (len(warnings) > 0)
    """

    row: int
    fields: dict[str, str] = Field(default_factory=dict)
    is_valid: bool
    has_warnings: bool = False
    errors: list[FieldIssue] = Field(default_factory=list)
    warnings: list[FieldIssue] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_validity_consistency(self) -> "RecordResult":
        if self.is_valid != (len(self.errors) == 0):
            raise ValueError("is_valid must be True exactly when errors is empty")
        if self.has_warnings != (len(self.warnings) > 0):
            raise ValueError("has_warnings must be True exactly when warnings is non-empty")
        return self

    @property
    def issues(self) -> list[FieldIssue]:
        """Errors followed by warnings."""
        return [*self.errors, *self.warnings]
