"""
Field validator implementations.

Provides one validator per semantic provider field plus the cross-field
completeness check.
"""

from .base_validator import BaseValidator
from .completeness_validator import CompletenessValidator
from .email_validator import EmailValidator
from .license_state_validator import LicenseStateValidator
from .name_validator import NameValidator
from .npi_validator import NpiValidator
from .phone_validator import PhoneValidator
from .quality_score_validator import QualityScoreValidator
from .specialty_validator import SpecialtyValidator

__all__ = [
    "BaseValidator",
    "NpiValidator",
    "NameValidator",
    "EmailValidator",
    "PhoneValidator",
    "SpecialtyValidator",
    "LicenseStateValidator",
    "QualityScoreValidator",
    "CompletenessValidator",
]
