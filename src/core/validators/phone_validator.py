"""
PhoneValidator - validates phone numbers against the canonical grouped format.
"""

import re

from src.core.models import RawRecord, ValidationOutcome

from .base_validator import BaseValidator


class PhoneValidator(BaseValidator):
    """
    Validates phone numbers of the form ``+<country>-XXXXX-XXXXX``.

    Spaces may replace the dashes. A bare 10-digit mobile number (leading digit
    in the configured mobile range) or a number carrying the country prefix
    without formatting is accepted with a warning and a reformatted suggestion.
    Anything else is invalid.
    """

    source_columns = ("phone",)

    def __init__(self, reference=None):
        super().__init__("phone", reference)
        self.country_code = self.reference.phone_country_code
        self.pattern = re.compile(rf"^\+{self.country_code}[\s-]?\d{{5}}[\s-]?\d{{5}}$")
        self.format_hint = f"Phone format should be +{self.country_code}-XXXXX-XXXXX"

    def format(self, national_digits: str) -> str:
        return f"+{self.country_code}-{national_digits[:5]}-{national_digits[5:]}"

    def validate(self, value: str, record: RawRecord | None = None) -> ValidationOutcome:
        phone = (value or "").strip()
        if not phone:
            return ValidationOutcome.fail("Phone is required")

        if self.pattern.match(phone):
            return ValidationOutcome.ok()

        digits = re.sub(r"\D", "", phone)

        if len(digits) == 10 and digits[0] in self.reference.mobile_leading_digits:
            return ValidationOutcome.warn(self.format_hint, suggested=self.format(digits))

        if len(digits) == len(self.country_code) + 10 and digits.startswith(self.country_code):
            return ValidationOutcome.warn(
                self.format_hint, suggested=self.format(digits[len(self.country_code):])
            )

        return ValidationOutcome.fail("invalid phone number format")

    @property
    def rule_type(self) -> str:
        return "phone"
