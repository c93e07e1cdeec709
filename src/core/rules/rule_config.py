"""
Reference data configuration.

Loads the approved specialty list, the region-code whitelist and the phone
numbering settings from YAML, and provides utilities for building them in tests.
The result is immutable and injected into validators; nothing here is mutated
after startup.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_SPECIALTIES: tuple[str, ...] = (
    "Cardiology",
    "Internal Medicine",
    "Pediatrics",
    "Orthopedics",
    "Dermatology",
    "Neurology",
    "Oncology",
    "Psychiatry",
    "Radiology",
    "Anesthesiology",
    "Emergency Medicine",
    "Family Medicine",
    "Obstetrics and Gynecology",
    "Ophthalmology",
    "Pathology",
    "Physical Medicine and Rehabilitation",
    "Surgery",
    "Urology",
)

# Indian state and union territory codes
DEFAULT_REGION_CODES: frozenset[str] = frozenset({
    "AN", "AP", "AR", "AS", "BR", "CH", "CG", "DN", "DL", "GA", "GJ", "HR",
    "HP", "JK", "JH", "KA", "KL", "LA", "LD", "MP", "MH", "MN", "ML", "MZ",
    "NL", "OD", "PY", "PB", "RJ", "SK", "TN", "TS", "TR", "UP", "UK", "WB",
})

DEFAULT_RECOMMENDED_FIELDS: tuple[str, ...] = ("specialty", "phone", "email", "city", "state")


class ReferenceData(BaseModel):
    """
    Read-only reference data used by the field validators.

    Attributes:
        approved_specialties: Specialties accepted by the specialty validator
        default_specialty: Suggestion offered when no approved entry matches
        region_codes: Valid two-letter license/region codes
        phone_country_code: Country prefix of the canonical phone format
        mobile_leading_digits: Digits a bare 10-digit mobile number may start with
        recommended_fields: Fields whose absence produces a completeness warning
        low_quality_threshold: Supplied quality scores below this raise a warning
    """

    approved_specialties: tuple[str, ...] = DEFAULT_SPECIALTIES
    default_specialty: str = "Internal Medicine"
    region_codes: frozenset[str] = DEFAULT_REGION_CODES
    phone_country_code: str = Field("91", pattern=r"^\d{1,3}$")
    mobile_leading_digits: frozenset[str] = frozenset("6789")
    recommended_fields: tuple[str, ...] = DEFAULT_RECOMMENDED_FIELDS
    low_quality_threshold: float = Field(40.0, ge=0.0, le=100.0)

    class Config:
        frozen = True

    @field_validator("region_codes")
    @classmethod
    def check_region_codes(cls, v: frozenset[str]) -> frozenset[str]:
        for code in v:
            if len(code) != 2 or not code.isalpha() or not code.isupper():
                raise ValueError(f"Region code '{code}' must be two upper-case letters")
        return v

    @field_validator("approved_specialties")
    @classmethod
    def check_specialties(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("approved_specialties must not be empty")
        return v


class ReferenceDataLoader:
    """
    Loads reference data from a YAML configuration file.

    Expected YAML format (every key optional):
    ```yaml
    specialties:
      approved:
        - Cardiology
        - Internal Medicine
      default: Internal Medicine
    regions:
      - KA
      - MH
    phone:
      country_code: "91"
      mobile_leading_digits: "6789"
    completeness:
      recommended_fields: [specialty, phone, email, city, state]
    quality_score:
      low_threshold: 40
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the reference data loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Reference data file not found: {config_path}")

    def load(self) -> ReferenceData:
        """
        Load and parse reference data from the YAML file.

        Returns:
            Immutable ReferenceData

        Raises:
            ValueError: If the YAML is not a mapping or contains invalid values
        """
        with open(self.config_path) as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ValueError("Reference data file must contain a mapping")

        return ReferenceData(**self._parse(config))

    def _parse(self, config: dict[str, Any]) -> dict[str, Any]:
        values: dict[str, Any] = {}

        specialties = config.get("specialties") or {}
        if "approved" in specialties:
            values["approved_specialties"] = tuple(str(s).strip() for s in specialties["approved"])
        if "default" in specialties:
            values["default_specialty"] = str(specialties["default"]).strip()

        if "regions" in config:
            values["region_codes"] = frozenset(str(r).strip().upper() for r in config["regions"])

        phone = config.get("phone") or {}
        if "country_code" in phone:
            values["phone_country_code"] = str(phone["country_code"])
        if "mobile_leading_digits" in phone:
            values["mobile_leading_digits"] = frozenset(str(phone["mobile_leading_digits"]))

        completeness = config.get("completeness") or {}
        if "recommended_fields" in completeness:
            values["recommended_fields"] = tuple(completeness["recommended_fields"])

        quality = config.get("quality_score") or {}
        if "low_threshold" in quality:
            values["low_quality_threshold"] = float(quality["low_threshold"])

        return values


def load_reference_data(path: str | Path | None = None) -> ReferenceData:
    """Load reference data from a file, or return the built-in defaults."""
    if path is None:
        return ReferenceData()
    return ReferenceDataLoader(path).load()


class ReferenceDataBuilder:
    """
    Programmatically build reference data (for testing or custom deployments).
    """

    def __init__(self):
        """Start from the built-in defaults."""
        self.values: dict[str, Any] = {}

    def with_specialties(self, *specialties: str, default: str | None = None) -> "ReferenceDataBuilder":
        self.values["approved_specialties"] = tuple(specialties)
        if default is not None:
            self.values["default_specialty"] = default
        return self

    def with_regions(self, *codes: str) -> "ReferenceDataBuilder":
        self.values["region_codes"] = frozenset(codes)
        return self

    def with_phone(self, country_code: str, mobile_leading_digits: str = "6789") -> "ReferenceDataBuilder":
        self.values["phone_country_code"] = country_code
        self.values["mobile_leading_digits"] = frozenset(mobile_leading_digits)
        return self

    def with_recommended_fields(self, *fields: str) -> "ReferenceDataBuilder":
        self.values["recommended_fields"] = tuple(fields)
        return self

    def build(self) -> ReferenceData:
        """Build and return the reference data."""
        return ReferenceData(**self.values)
