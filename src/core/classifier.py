"""
Record classifier for running the field validators over input rows.

The classifier owns a registry of validators keyed by field name, applies
every applicable validator to a RawRecord, and flattens the outcomes into a
single RecordResult.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any

from src.core.models import FieldIssue, RawRecord, RecordResult, ValidationOutcome
from src.core.rules import ReferenceData
from src.core.validators import (
    BaseValidator,
    CompletenessValidator,
    EmailValidator,
    LicenseStateValidator,
    NameValidator,
    NpiValidator,
    PhoneValidator,
    QualityScoreValidator,
    SpecialtyValidator,
)


class RecordClassifier:
    """
    Classifies RawRecords as valid, invalid, or valid-with-warnings.

    A record with only warnings is valid; its suggested corrections are
    reported but never applied.
    """

    VALIDATOR_REGISTRY: dict[str, type[BaseValidator]] = {
        "npi": NpiValidator,
        "name": NameValidator,
        "email": EmailValidator,
        "phone": PhoneValidator,
        "specialty": SpecialtyValidator,
        "license_state": LicenseStateValidator,
        "quality_score": QualityScoreValidator,
        "completeness": CompletenessValidator,
    }

    def __init__(self, reference: ReferenceData | None = None, max_workers: int = 4):
        """
        Initialize the classifier.

        Args:
            reference: Read-only reference data shared by all validators
            max_workers: Threads used by classify_batch
        """
        self.reference = reference or ReferenceData()
        self.max_workers = max(1, max_workers)
        self.validators: dict[str, BaseValidator] = {
            field: validator_class(self.reference)
            for field, validator_class in self.VALIDATOR_REGISTRY.items()
        }

    def validate_field(self, field: str, record: RawRecord) -> ValidationOutcome:
        """Run the validator registered for one field against a record."""
        validator = self.validators[field]
        return validator.validate(validator.extract(record), record)

    def classify(self, record: RawRecord) -> RecordResult:
        """
        Run every applicable validator over one record.

        Args:
            record: The RawRecord to classify

        Returns:
            RecordResult with row-tagged errors and warnings
        """
        errors: list[FieldIssue] = []
        warnings: list[FieldIssue] = []

        for field, validator in self.validators.items():
            if not validator.applies_to(record):
                continue

            value = validator.extract(record)
            outcome = validator.validate(value, record)
            current = value or None

            for message in outcome.errors:
                errors.append(FieldIssue(
                    row=record.row_number,
                    field=field,
                    message=message,
                    current=current,
                    suggested=outcome.suggested,
                    severity="error",
                ))
            for message in outcome.warnings:
                warnings.append(FieldIssue(
                    row=record.row_number,
                    field=field,
                    message=message,
                    current=current,
                    suggested=outcome.suggested,
                    severity="warning",
                ))

        return RecordResult(
            row=record.row_number,
            fields=dict(record.values),
            is_valid=len(errors) == 0,
            has_warnings=len(warnings) > 0,
            errors=errors,
            warnings=warnings,
        )

    def classify_batch(self, records: list[RawRecord]) -> list[RecordResult]:
        """
        Classify many records in parallel.

        Each result depends only on its own record, so records are fanned out
        to a thread pool. Results come back in input order.
        """
        if len(records) <= 1 or self.max_workers == 1:
            return [self.classify(record) for record in records]

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(self.classify, records))

    def get_rule_summary(self) -> dict[str, Any]:
        """
        Get summary of registered validators.

        Returns:
            Dictionary with the validator count and the fields covered
        """
        return {
            "total_validators": len(self.validators),
            "fields": list(self.validators),
            "approved_specialties": len(self.reference.approved_specialties),
            "region_codes": len(self.reference.region_codes),
        }
