"""
Data quality scoring for provider records.

The score is a completeness density over a fixed field set, independent of
whether the record passed validation.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

QUALITY_FIELDS: tuple[str, ...] = (
    "npi",
    "first_name",
    "last_name",
    "specialty",
    "phone",
    "email",
    "address_line1",
    "city",
    "state",
    "zip_code",
    "license_number",
    "license_state",
    "credential",
    "taxonomy_code",
)


def _is_filled(value: Any) -> bool:
    if value is None:
        return False
    return str(value).strip() != ""


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value + 0.5)


def calculate_quality_score(record: Mapping[str, Any] | BaseModel) -> int:
    """
    Compute the 0-100 data quality score of a record.

    Counts how many of the 14 quality fields are non-empty after trimming,
    divides by 14, scales to 100 and rounds to the nearest integer.

    Args:
        record: Provider data as a mapping or a pydantic model

    Returns:
        Integer score between 0 and 100

    Examples:
        >>> calculate_quality_score({"npi": "1234567890", "first_name": "Asha",
        ...     "last_name": "Raman", "specialty": "Cardiology",
        ...     "phone": "+91-98765-43210", "email": "asha@example.com"})
        43
    """
    data = record.model_dump() if isinstance(record, BaseModel) else record
    filled = sum(1 for field in QUALITY_FIELDS if _is_filled(data.get(field)))
    return round_half_up(filled / len(QUALITY_FIELDS) * 100)
