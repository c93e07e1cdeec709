"""
Base validator interface for all field validators.

All validators must inherit from BaseValidator and implement the validate() method.
Validators are pure: they never raise for malformed input and never mutate
the record; bad or missing data is reported through the returned outcome.
"""

from abc import ABC, abstractmethod

from src.core.models import RawRecord, ValidationOutcome
from src.core.rules.rule_config import ReferenceData


class BaseValidator(ABC):
    """
    Abstract base class for all field validators.

    Each validator owns exactly one semantic field (npi, name, email, phone,
    specialty, license_state, quality_score) or a cross-field check.
    """

    #: Columns the validator reads, in order of preference
    source_columns: tuple[str, ...] = ()

    def __init__(self, field_name: str, reference: ReferenceData | None = None):
        """
        Initialize validator.

        Args:
            field_name: Name the field is reported under
            reference: Read-only reference data (defaults to the built-in lists)
        """
        self.field_name = field_name
        self.reference = reference or ReferenceData()

    def extract(self, record: RawRecord) -> str:
        """Pull this validator's raw value out of a record."""
        columns = self.source_columns or (self.field_name,)
        return record.first_present(*columns)

    def applies_to(self, record: RawRecord) -> bool:
        """Whether this validator runs for the given record."""
        return True

    @abstractmethod
    def validate(self, value: str, record: RawRecord | None = None) -> ValidationOutcome:
        """
        Validate a raw value.

        Args:
            value: The raw string value for the field
            record: The entire record (for context-dependent validation)

        Returns:
            ValidationOutcome describing errors, warnings and a suggested value
        """
        pass

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the rule type identifier."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name})"
