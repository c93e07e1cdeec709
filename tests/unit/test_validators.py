"""
Unit tests for field validators.

Includes property-based testing with hypothesis for validators.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from src.core.models import RawRecord
from src.core.rules import ReferenceDataBuilder
from src.core.validators import (
    CompletenessValidator,
    EmailValidator,
    LicenseStateValidator,
    NameValidator,
    NpiValidator,
    PhoneValidator,
    QualityScoreValidator,
    SpecialtyValidator,
)

pytestmark = pytest.mark.unit


def record(**values) -> RawRecord:
    return RawRecord(row_number=2, values=values)


class TestNpiValidator:
    """Tests for NpiValidator"""

    def test_ten_digits_pass(self):
        outcome = NpiValidator().validate("1234567890")
        assert outcome.valid
        assert outcome.errors == []
        assert outcome.suggested is None

    def test_short_npi_is_padded_in_suggestion(self):
        outcome = NpiValidator().validate("12345")
        assert not outcome.valid
        assert outcome.errors == ["NPI must be exactly 10 digits"]
        assert outcome.suggested == "0000012345"

    def test_long_npi_is_truncated_in_suggestion(self):
        outcome = NpiValidator().validate("123456789012")
        assert outcome.errors == ["NPI must be exactly 10 digits"]
        assert outcome.suggested == "1234567890"

    def test_non_digits_are_stripped_from_suggestion(self):
        outcome = NpiValidator().validate("123-456-789")
        assert not outcome.valid
        assert outcome.suggested == "0123456789"

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_missing_npi(self, value):
        outcome = NpiValidator().validate(value)
        assert outcome.errors == ["NPI is required"]
        assert outcome.suggested is None

    @given(st.text(alphabet="0123456789", min_size=10, max_size=10))
    def test_property_any_ten_digit_string_passes(self, value):
        assert NpiValidator().validate(value).valid

    @given(st.text(max_size=30))
    def test_property_suggestion_is_itself_valid(self, value):
        """Property test: a suggested NPI always passes the same validator"""
        validator = NpiValidator()
        outcome = validator.validate(value)
        if outcome.suggested is not None:
            assert validator.validate(outcome.suggested).valid


class TestNameValidator:
    """Tests for NameValidator"""

    def test_valid_name(self):
        assert NameValidator().validate("Asha Raman").valid

    def test_two_characters_is_too_short(self):
        outcome = NameValidator().validate("Al")
        assert outcome.errors == ["Name must be at least 3 characters"]

    def test_missing_name(self):
        assert NameValidator().validate("  ").errors == ["Name is required"]

    def test_name_column_preferred(self):
        validator = NameValidator()
        assert validator.extract(record(name="Dr Asha", first_name="X", last_name="Y")) == "Dr Asha"

    def test_first_and_last_name_are_joined(self):
        validator = NameValidator()
        assert validator.extract(record(first_name="Asha", last_name="Raman")) == "Asha Raman"

    def test_only_last_name_present(self):
        validator = NameValidator()
        assert validator.extract(record(first_name="", last_name="Raman")) == "Raman"


class TestEmailValidator:
    """Tests for EmailValidator"""

    def test_valid_email(self):
        assert EmailValidator().validate("asha@example.com").valid

    def test_missing_top_level_domain(self):
        outcome = EmailValidator().validate("john@invalid")
        assert not outcome.valid
        assert outcome.errors == ["invalid email format"]
        assert outcome.suggested == "john@invalid"

    def test_embedded_whitespace_suggestion(self):
        outcome = EmailValidator().validate("asha @example.com")
        assert not outcome.valid
        assert outcome.suggested == "asha@example.com"

    def test_missing_email(self):
        assert EmailValidator().validate("").errors == ["Email is required"]


class TestPhoneValidator:
    """Tests for PhoneValidator"""

    @pytest.mark.parametrize("value", ["+91-98765-43210", "+91 98765 43210", "+919876543210"])
    def test_canonical_formats_pass_cleanly(self, value):
        outcome = PhoneValidator().validate(value)
        assert outcome.valid
        assert outcome.warnings == []

    def test_bare_mobile_number_warns_with_suggestion(self):
        outcome = PhoneValidator().validate("9876543210")
        assert outcome.valid
        assert outcome.errors == []
        assert outcome.warnings == ["Phone format should be +91-XXXXX-XXXXX"]
        assert outcome.suggested == "+91-98765-43210"

    def test_country_prefix_without_plus_warns(self):
        outcome = PhoneValidator().validate("919876543210")
        assert outcome.valid
        assert outcome.suggested == "+91-98765-43210"

    def test_landline_style_number_is_invalid(self):
        outcome = PhoneValidator().validate("1234567890")
        assert not outcome.valid
        assert outcome.errors == ["invalid phone number format"]

    def test_garbage_is_invalid(self):
        assert PhoneValidator().validate("call me").errors == ["invalid phone number format"]

    def test_missing_phone(self):
        assert PhoneValidator().validate("").errors == ["Phone is required"]

    def test_country_code_comes_from_reference_data(self):
        reference = ReferenceDataBuilder().with_phone("44", "7").build()
        validator = PhoneValidator(reference)
        assert validator.validate("+44-79876-54321").valid
        assert validator.validate("7987654321").suggested == "+44-79876-54321"
        assert not validator.validate("+91-98765-43210").valid

    @given(st.text(max_size=20))
    def test_property_never_raises_and_is_deterministic(self, value):
        validator = PhoneValidator()
        assert validator.validate(value) == validator.validate(value)


class TestSpecialtyValidator:
    """Tests for SpecialtyValidator"""

    def test_approved_specialty_passes(self):
        assert SpecialtyValidator().validate("Cardiology").valid

    def test_match_is_case_insensitive(self):
        assert SpecialtyValidator().validate("cardiology").valid

    def test_unknown_specialty_falls_back_to_default(self):
        outcome = SpecialtyValidator().validate("General Practice")
        assert not outcome.valid
        assert outcome.errors == ["specialty not found in approved list"]
        assert outcome.suggested == "Internal Medicine"

    def test_partial_specialty_suggests_containing_entry(self):
        outcome = SpecialtyValidator().validate("Pediatric")
        assert not outcome.valid
        assert outcome.suggested == "Pediatrics"

    def test_longer_specialty_suggests_contained_entry(self):
        outcome = SpecialtyValidator().validate("Interventional Cardiology")
        assert outcome.suggested == "Cardiology"

    def test_missing_specialty(self):
        assert SpecialtyValidator().validate("").errors == ["Specialty is required"]

    def test_custom_approved_list(self):
        reference = ReferenceDataBuilder().with_specialties("Dentistry", default="Dentistry").build()
        validator = SpecialtyValidator(reference)
        assert validator.validate("dentistry").valid
        assert validator.validate("Cardiology").suggested == "Dentistry"


class TestLicenseStateValidator:
    """Tests for LicenseStateValidator"""

    def test_known_code_passes(self):
        assert LicenseStateValidator().validate("KA").valid

    def test_lower_case_code_passes(self):
        assert LicenseStateValidator().validate("mh").valid

    def test_full_name_suggests_first_two_letters(self):
        outcome = LicenseStateValidator().validate("California")
        assert not outcome.valid
        assert outcome.errors == ["License state must be 2 letters"]
        assert outcome.suggested == "CA"

    def test_unknown_two_letter_code(self):
        outcome = LicenseStateValidator().validate("CA")
        assert outcome.errors == ["invalid state code"]

    def test_digits_are_rejected(self):
        outcome = LicenseStateValidator().validate("K1")
        assert outcome.errors == ["License state must be 2 letters"]
        assert outcome.suggested is None

    def test_missing_license_state(self):
        assert LicenseStateValidator().validate("").errors == ["License state is required"]

    def test_falls_back_to_state_column(self):
        validator = LicenseStateValidator()
        assert validator.extract(record(state="TN")) == "TN"
        assert validator.extract(record(license_state="KA", state="TN")) == "KA"


class TestQualityScoreValidator:
    """Tests for QualityScoreValidator"""

    def test_only_applies_when_column_present(self):
        validator = QualityScoreValidator()
        assert not validator.applies_to(record(npi="1234567890"))
        assert validator.applies_to(record(quality_score=""))
        assert validator.applies_to(record(qualityscore="80"))

    def test_score_in_range_passes(self):
        outcome = QualityScoreValidator().validate("85")
        assert outcome.valid
        assert outcome.warnings == []

    def test_low_score_warns(self):
        outcome = QualityScoreValidator().validate("12.5")
        assert outcome.valid
        assert outcome.warnings == ["very low quality score - please verify"]

    def test_out_of_range_suggests_clamped_value(self):
        outcome = QualityScoreValidator().validate("150")
        assert outcome.errors == ["Quality score must be between 0 and 100"]
        assert outcome.suggested == "100"

        outcome = QualityScoreValidator().validate("-3")
        assert outcome.suggested == "0"

    @pytest.mark.parametrize("value", ["abc", "nan", "inf"])
    def test_non_numeric_is_invalid(self, value):
        assert QualityScoreValidator().validate(value).errors == ["Quality score must be a number"]

    def test_blank_is_required(self):
        assert QualityScoreValidator().validate(" ").errors == ["Quality score is required"]


class TestCompletenessValidator:
    """Tests for CompletenessValidator"""

    def test_complete_record_has_no_warning(self):
        rec = record(specialty="Cardiology", phone="x", email="y", city="Pune", state="MH")
        outcome = CompletenessValidator().validate("", rec)
        assert outcome.valid
        assert outcome.warnings == []

    def test_single_aggregate_warning_names_missing_fields(self):
        rec = record(specialty="Cardiology", phone="x", email="y", city=" ")
        outcome = CompletenessValidator().validate("", rec)
        assert outcome.valid
        assert outcome.errors == []
        assert outcome.warnings == ["Missing recommended fields: city, state"]

    def test_recommended_fields_come_from_reference_data(self):
        reference = ReferenceDataBuilder().with_recommended_fields("zip_code").build()
        outcome = CompletenessValidator(reference).validate("", record(city="Pune"))
        assert outcome.warnings == ["Missing recommended fields: zip_code"]


class TestValidatorPurity:
    """Validators never raise and return the same outcome for the same input"""

    VALIDATORS = [
        NpiValidator(),
        NameValidator(),
        EmailValidator(),
        PhoneValidator(),
        SpecialtyValidator(),
        LicenseStateValidator(),
        QualityScoreValidator(),
    ]

    @given(st.one_of(st.none(), st.text(max_size=40)))
    def test_property_idempotent(self, value):
        for validator in self.VALIDATORS:
            first = validator.validate(value)
            second = validator.validate(value)
            assert first == second
            assert first.valid == (len(first.errors) == 0)

    @given(st.dictionaries(st.sampled_from(["npi", "name", "email", "state"]), st.text(max_size=10)))
    def test_property_record_is_not_mutated(self, values):
        rec = record(**values)
        before = rec.model_dump()
        for validator in [*self.VALIDATORS, CompletenessValidator()]:
            validator.validate(validator.extract(rec), rec)
        assert rec.model_dump() == before
