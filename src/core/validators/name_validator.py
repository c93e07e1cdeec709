"""
NameValidator - validates the provider's display name.
"""

from src.core.models import RawRecord, ValidationOutcome

from .base_validator import BaseValidator

MIN_NAME_LENGTH = 3


class NameValidator(BaseValidator):
    """
    Validates that the provider name is present and at least 3 characters.

    Reads the ``name`` column, or ``first_name`` and ``last_name`` joined by a
    space when the file has no ``name`` column.
    """

    def __init__(self, reference=None):
        super().__init__("name", reference)

    def extract(self, record: RawRecord) -> str:
        if record.get("name").strip():
            return record.get("name")
        parts = [record.get("first_name").strip(), record.get("last_name").strip()]
        return " ".join(p for p in parts if p)

    def validate(self, value: str, record: RawRecord | None = None) -> ValidationOutcome:
        name = (value or "").strip()
        if not name:
            return ValidationOutcome.fail("Name is required")

        if len(name) < MIN_NAME_LENGTH:
            return ValidationOutcome.fail(f"Name must be at least {MIN_NAME_LENGTH} characters")

        return ValidationOutcome.ok()

    @property
    def rule_type(self) -> str:
        return "name"
