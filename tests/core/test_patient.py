"""Patient Profile: frozen record, history log and the pure checks.

Tests cover:
    - Blank profile defaults, full_name
    - with_details ignores None, with_history_entry appends
    - check_patient_details: blank names, age range, non-numeric age
    - check_history_entry: blank type, non-date
"""

from datetime import date

import pytest

from medsim.core.domain_types import InsuranceLevel
from medsim.core.errors import InvalidPatientDataError
from medsim.core.patient import (
    MedicalHistoryEntry,
    PatientProfile,
    check_age,
    check_history_entry,
    check_patient_details,
)


def test_blank_profile_defaults():
    profile = PatientProfile()
    assert profile.full_name == ""
    assert profile.insurance_level == InsuranceLevel.NORMAL
    assert profile.medical_history == ()


def test_with_details_ignores_none():
    profile = PatientProfile(first_name="John", last_name="Doe", age=31)
    updated = profile.with_details(first_name="Jane", age=None)
    assert updated.full_name == "Jane Doe"
    assert updated.age == 31
    assert profile.first_name == "John"


def test_with_history_entry_appends_in_order():
    first = MedicalHistoryEntry(date(2025, 11, 15), "Lab Test", "Blood test results normal")
    second = MedicalHistoryEntry(date(2025, 12, 20), "Checkup")
    profile = PatientProfile().with_history_entry(first).with_history_entry(second)
    assert profile.medical_history == (first, second)


def test_to_dict_serializes_history():
    entry = MedicalHistoryEntry(date(2025, 12, 20), "Checkup", "all good")
    data = PatientProfile(first_name="John").with_history_entry(entry).to_dict()
    assert data["insurance_level"] == "NORMAL"
    assert data["medical_history"] == [
        {"date": "2025-12-20", "entry_type": "Checkup", "notes": "all good"},
    ]


# ─── Checks ──────────────────────────────────────────────────────

def test_details_all_none_passes():
    assert check_patient_details(None, None, None) is None


def test_blank_first_name_rejected():
    error = check_patient_details("  ", "Doe", 30)
    assert isinstance(error, InvalidPatientDataError)
    assert error.field_name == "first_name"
    assert error.http_status == 400


def test_first_error_wins():
    error = check_patient_details("", "", -1)
    assert error.field_name == "first_name"


@pytest.mark.parametrize("age", [-1, 151, "31", True, 3.5])
def test_bad_age_rejected(age):
    assert isinstance(check_age(age), InvalidPatientDataError)


@pytest.mark.parametrize("age", [0, 31, 150])
def test_age_bounds_inclusive(age):
    assert check_age(age) is None


def test_non_string_name_rejected():
    assert isinstance(check_patient_details(42, None, None), InvalidPatientDataError)


def test_history_entry_checks():
    assert check_history_entry(date(2025, 1, 1), "Checkup") is None
    assert isinstance(check_history_entry(date(2025, 1, 1), " "), InvalidPatientDataError)
    assert isinstance(check_history_entry("2025-01-01", "Checkup"), InvalidPatientDataError)
