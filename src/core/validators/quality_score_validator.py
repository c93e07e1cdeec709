"""
QualityScoreValidator - validates a quality score supplied in the input file.
"""

import math

from src.core.models import RawRecord, ValidationOutcome

from .base_validator import BaseValidator


def _format_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else str(value)


class QualityScoreValidator(BaseValidator):
    """
    Validates a directly supplied quality score: numeric and within [0, 100].

    Only runs when the record carries a ``quality_score`` (or ``qualityscore``)
    column. Scores under the low-quality threshold raise a warning.
    """

    source_columns = ("quality_score", "qualityscore")

    def __init__(self, reference=None):
        super().__init__("quality_score", reference)

    def applies_to(self, record: RawRecord) -> bool:
        return any(record.has_column(c) for c in self.source_columns)

    def validate(self, value: str, record: RawRecord | None = None) -> ValidationOutcome:
        raw = (value or "").strip()
        if not raw:
            return ValidationOutcome.fail("Quality score is required")

        try:
            score = float(raw)
        except ValueError:
            return ValidationOutcome.fail("Quality score must be a number")

        if not math.isfinite(score):
            return ValidationOutcome.fail("Quality score must be a number")

        if score < 0 or score > 100:
            clamped = max(0.0, min(100.0, score))
            return ValidationOutcome.fail(
                "Quality score must be between 0 and 100", suggested=_format_number(clamped)
            )

        if score < self.reference.low_quality_threshold:
            return ValidationOutcome.warn("very low quality score - please verify")

        return ValidationOutcome.ok()

    @property
    def rule_type(self) -> str:
        return "quality_score"
