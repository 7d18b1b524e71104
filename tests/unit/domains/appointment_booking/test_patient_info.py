# ============================================================================
# Tests for PatientInfo validation
# ============================================================================
"""Unit tests for PatientInfo.

A patient form is valid exactly when all six required fields are non-empty
and the email looks like an address.
"""

import pytest

from app.domains.appointment_booking.domain.value_objects import PatientInfo
from app.domains.appointment_booking.domain.value_objects.patient_info import (
    INVALID_EMAIL_MESSAGE,
    REQUIRED_FIELD_MESSAGES,
)


class TestPatientInfoValidation:
    """Tests for PatientInfo.validate()."""

    def test_complete_info_is_valid(self, complete_patient_info) -> None:
        """Should accept a form with every field filled."""
        assert complete_patient_info.validate() == {}
        assert complete_patient_info.is_valid() is True

    def test_empty_info_reports_every_field(self) -> None:
        """Should report all six required fields on an empty form."""
        errors = PatientInfo().validate()
        assert errors == REQUIRED_FIELD_MESSAGES

    @pytest.mark.parametrize("field_name", list(REQUIRED_FIELD_MESSAGES))
    def test_each_blank_field_blocks_validity(self, complete_patient_info, field_name) -> None:
        """Should be invalid when any single required field is blank."""
        info = complete_patient_info.with_field(field_name, "   ")
        errors = info.validate()
        assert errors == {field_name: REQUIRED_FIELD_MESSAGES[field_name]}
        assert info.is_valid() is False

    @pytest.mark.parametrize("email", ["linh", "linh@example", "@example.com", "linh example@com"])
    def test_malformed_email_is_invalid(self, complete_patient_info, email) -> None:
        """Should reject emails without user, @, domain and dot."""
        info = complete_patient_info.with_field("email", email)
        assert info.validate() == {"email": INVALID_EMAIL_MESSAGE}

    @pytest.mark.parametrize("email", ["a@b.co", "first.last+tag@clinic.example.org"])
    def test_well_formed_email_is_valid(self, complete_patient_info, email) -> None:
        """Should accept well-formed emails."""
        assert complete_patient_info.with_field("email", email).is_valid() is True

    def test_blank_email_reports_required_not_invalid(self, complete_patient_info) -> None:
        """Should report the required message, not the format message, for a blank email."""
        errors = complete_patient_info.with_field("email", "").validate()
        assert errors["email"] == REQUIRED_FIELD_MESSAGES["email"]


class TestPatientInfoWithField:
    """Tests for PatientInfo.with_field()."""

    def test_returns_new_instance(self, complete_patient_info) -> None:
        """Should leave the original untouched."""
        updated = complete_patient_info.with_field("phone", "+84 91 000 0000")
        assert updated.phone == "+84 91 000 0000"
        assert complete_patient_info.phone == "+84 90 123 4567"

    def test_unknown_field_raises(self, complete_patient_info) -> None:
        """Should raise ValueError for a field outside the form."""
        with pytest.raises(ValueError, match="Unknown patient info field"):
            complete_patient_info.with_field("blood_type", "O+")

    def test_field_names_order(self) -> None:
        """Should list fields in form order."""
        assert PatientInfo.field_names() == [
            "full_name",
            "email",
            "phone",
            "date_of_birth",
            "address",
            "insurance",
        ]
