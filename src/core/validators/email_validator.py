"""
EmailValidator - validates email address shape.
"""

import re

from src.core.models import RawRecord, ValidationOutcome

from .base_validator import BaseValidator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class EmailValidator(BaseValidator):
    """Validates that an email is present and looks like local@domain.tld."""

    source_columns = ("email",)

    def __init__(self, reference=None):
        super().__init__("email", reference)

    def validate(self, value: str, record: RawRecord | None = None) -> ValidationOutcome:
        email = (value or "").strip()
        if not email:
            return ValidationOutcome.fail("Email is required")

        if not EMAIL_PATTERN.match(email):
            return ValidationOutcome.fail("invalid email format", suggested=re.sub(r"\s", "", email))

        return ValidationOutcome.ok()

    @property
    def rule_type(self) -> str:
        return "email"
