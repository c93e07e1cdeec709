"""
CompletenessValidator - cross-field check for recommended fields.
"""

from src.core.models import RawRecord, ValidationOutcome

from .base_validator import BaseValidator


class CompletenessValidator(BaseValidator):
    """
    Emits one aggregate warning naming every missing recommended field.

    Evaluated once per record, never per field. Never produces errors.
    """

    def __init__(self, reference=None):
        super().__init__("completeness", reference)

    def extract(self, record: RawRecord) -> str:
        return ""

    def missing_fields(self, record: RawRecord) -> list[str]:
        return [f for f in self.reference.recommended_fields if not record.get(f).strip()]

    def validate(self, value: str, record: RawRecord | None = None) -> ValidationOutcome:
        if record is None:
            return ValidationOutcome.ok()

        missing = self.missing_fields(record)
        if missing:
            return ValidationOutcome.warn(f"Missing recommended fields: {', '.join(missing)}")

        return ValidationOutcome.ok()

    @property
    def rule_type(self) -> str:
        return "completeness"
