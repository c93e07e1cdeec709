"""
LicenseStateValidator - validates two-letter license region codes.
"""

from src.core.models import RawRecord, ValidationOutcome

from .base_validator import BaseValidator


class LicenseStateValidator(BaseValidator):
    """
    Validates that the license state is a known two-letter region code.

    Reads ``license_state``, falling back to ``state``.
    """

    source_columns = ("license_state", "state")

    def __init__(self, reference=None):
        super().__init__("license_state", reference)

    def validate(self, value: str, record: RawRecord | None = None) -> ValidationOutcome:
        state = (value or "").strip().upper()
        if not state:
            return ValidationOutcome.fail("License state is required")

        if len(state) != 2:
            return ValidationOutcome.fail("License state must be 2 letters", suggested=state[:2])

        if not state.isalpha():
            return ValidationOutcome.fail("License state must be 2 letters")

        if state not in self.reference.region_codes:
            return ValidationOutcome.fail("invalid state code")

        return ValidationOutcome.ok()

    @property
    def rule_type(self) -> str:
        return "license_state"
