"""
NpiValidator - validates the 10-digit National Provider Identifier.
"""

import re

from src.core.models import RawRecord, ValidationOutcome

from .base_validator import BaseValidator

NPI_PATTERN = re.compile(r"^\d{10}$")


def suggest_npi(value: str) -> str:
    """Digits only, left-padded with zeros and truncated to 10 characters."""
    digits = re.sub(r"\D", "", value)
    return digits.rjust(10, "0")[:10]


class NpiValidator(BaseValidator):
    """
    Validates that the NPI is present and exactly 10 digits.

    The suggestion is a hint only; it is never applied to the record.
    """

    source_columns = ("npi",)

    def __init__(self, reference=None):
        super().__init__("npi", reference)

    def validate(self, value: str, record: RawRecord | None = None) -> ValidationOutcome:
        npi = (value or "").strip()
        if not npi:
            return ValidationOutcome.fail("NPI is required")

        if not NPI_PATTERN.match(npi):
            return ValidationOutcome.fail("NPI must be exactly 10 digits", suggested=suggest_npi(npi))

        return ValidationOutcome.ok()

    @property
    def rule_type(self) -> str:
        return "npi"
