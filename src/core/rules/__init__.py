"""
Reference data configuration for the field validators.
"""

from .rule_config import (
    ReferenceData,
    ReferenceDataBuilder,
    ReferenceDataLoader,
    load_reference_data,
)

__all__ = [
    "ReferenceData",
    "ReferenceDataLoader",
    "ReferenceDataBuilder",
    "load_reference_data",
]
