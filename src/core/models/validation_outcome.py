"""
ValidationOutcome model: the result of one field validator on one value.
"""

from pydantic import BaseModel, Field


class ValidationOutcome(BaseModel):
    """
    Structured outcome of a single field validator.

    Attributes:
        valid: Whether the value passes the hard rules
        errors: Hard rule violations (any entry makes the record invalid)
        warnings: Soft issues that do not affect validity
        suggested: Advisory corrected value, never applied automatically
    """

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    suggested: str | None = None

    @classmethod
    def ok(cls) -> "ValidationOutcome":
        return cls(valid=True)

    @classmethod
    def fail(cls, message: str, suggested: str | None = None) -> "ValidationOutcome":
        return cls(valid=False, errors=[message], suggested=suggested)

    @classmethod
    def warn(cls, message: str, suggested: str | None = None) -> "ValidationOutcome":
        return cls(valid=True, warnings=[message], suggested=suggested)
