"""
SpecialtyValidator - checks specialties against the approved list.
"""

from src.core.models import RawRecord, ValidationOutcome

from .base_validator import BaseValidator


class SpecialtyValidator(BaseValidator):
    """
    Validates that the specialty is in the approved list (case-insensitive).

    The suggestion is the first approved entry where either string contains
    the other, falling back to the configured default specialty.
    """

    source_columns = ("specialty",)

    def __init__(self, reference=None):
        super().__init__("specialty", reference)
        self._approved_lower = {s.lower() for s in self.reference.approved_specialties}

    def closest_match(self, specialty: str) -> str:
        needle = specialty.lower()
        for approved in self.reference.approved_specialties:
            candidate = approved.lower()
            if needle in candidate or candidate in needle:
                return approved
        return self.reference.default_specialty

    def validate(self, value: str, record: RawRecord | None = None) -> ValidationOutcome:
        specialty = (value or "").strip()
        if not specialty:
            return ValidationOutcome.fail("Specialty is required")

        if specialty.lower() not in self._approved_lower:
            return ValidationOutcome.fail(
                "specialty not found in approved list", suggested=self.closest_match(specialty)
            )

        return ValidationOutcome.ok()

    @property
    def rule_type(self) -> str:
        return "specialty"
