"""Patient Registry: profile edits, medical history and listeners.

Invariants:
    - Rejected edits leave the profile exactly as it was
    - Listeners hear every committed edit, a failing listener is isolated

Tests cover:
    - update_details: partial update, validation failure
    - replace_profile keeps the current insurance level
    - add_medical_history_entry: append order, blank type rejected
    - Listeners: change kind, unregister, failure isolation
    - Insurance level follows the governor through its listener
"""

from datetime import date

import pytest

from medsim.core.domain_types import InsuranceLevel, PatientChange
from medsim.core.errors import InvalidPatientDataError
from medsim.core.patient import MedicalHistoryEntry, PatientProfile
from medsim.services.patient_registry import PatientRegistry


class PatientRecorder:
    """Patient listener that keeps every (change, profile) pair."""

    def __init__(self):
        self.calls = []

    def __call__(self, change, profile):
        self.calls.append((change, profile))


@pytest.fixture
def patients() -> PatientRegistry:
    return PatientRegistry(PatientProfile(first_name="John", last_name="Doe", age=31))


@pytest.fixture
def patient_calls() -> PatientRecorder:
    return PatientRecorder()


# ─── Profile ─────────────────────────────────────────────────────

def test_update_details_changes_only_given_fields(patients):
    outcome = patients.update_details(age=32, vaccines="COVID-19, Flu")
    assert outcome.ok
    profile = patients.profile()
    assert profile.full_name == "John Doe"
    assert profile.age == 32
    assert profile.vaccines == "COVID-19, Flu"


def test_update_details_strips_names(patients):
    patients.update_details(first_name="  Jane ")
    assert patients.profile().first_name == "Jane"


def test_rejected_update_changes_nothing(patients, patient_calls):
    patients.register_listener(patient_calls)
    before = patients.profile()
    outcome = patients.update_details(first_name="Jane", age=200)
    assert isinstance(outcome.error, InvalidPatientDataError)
    assert patients.profile() == before
    assert patient_calls.calls == []


def test_replace_profile_keeps_insurance_level(patients, patient_calls):
    patients.set_insurance_level(InsuranceLevel.PREMIUM)
    patients.register_listener(patient_calls)
    outcome = patients.replace_profile(PatientProfile(first_name="Ann", last_name="Lee"))
    assert outcome.ok
    assert patients.profile().full_name == "Ann Lee"
    assert patients.profile().insurance_level == InsuranceLevel.PREMIUM
    assert patient_calls.calls[0][0] == PatientChange.REPLACED


def test_replace_profile_rejects_bad_history(patients):
    bad = PatientProfile(
        first_name="Ann",
        last_name="Lee",
        medical_history=(MedicalHistoryEntry(date(2025, 1, 1), ""),),
    )
    assert not patients.replace_profile(bad).ok
    assert patients.profile().first_name == "John"


# ─── Medical history ─────────────────────────────────────────────

def test_history_entries_kept_in_order(patients):
    patients.add_medical_history_entry(date(2025, 12, 20), "Checkup", "all good")
    patients.add_medical_history_entry(date(2025, 11, 15), "Lab Test")
    assert [e.entry_type for e in patients.medical_history()] == ["Checkup", "Lab Test"]


def test_history_returns_copy(patients):
    patients.add_medical_history_entry(date(2025, 12, 20), "Checkup")
    patients.medical_history().clear()
    assert len(patients.medical_history()) == 1


def test_blank_history_type_rejected(patients):
    outcome = patients.add_medical_history_entry(date(2025, 12, 20), "   ")
    assert isinstance(outcome.error, InvalidPatientDataError)
    assert patients.medical_history() == []


# ─── Listeners ───────────────────────────────────────────────────

def test_listener_told_about_updates(patients, patient_calls):
    patients.register_listener(patient_calls)
    patients.add_medical_history_entry(date(2025, 12, 20), "Checkup")
    [(change, profile)] = patient_calls.calls
    assert change == PatientChange.UPDATED
    assert len(profile.medical_history) == 1


def test_insurance_level_unchanged_is_silent(patients, patient_calls):
    patients.register_listener(patient_calls)
    patients.set_insurance_level(InsuranceLevel.NORMAL)
    assert patient_calls.calls == []


def test_unregistered_listener_not_called(patients, patient_calls):
    patients.register_listener(patient_calls)
    patients.unregister_listener(patient_calls)
    patients.update_details(age=40)
    assert patient_calls.calls == []


def test_failing_listener_does_not_block_others(patients, patient_calls):
    def broken(change, profile):
        raise RuntimeError("boom")

    patients.register_listener(broken)
    patients.register_listener(patient_calls)
    assert patients.update_details(age=40).ok
    assert len(patient_calls.calls) == 1


def test_follows_governor_insurance_level(governor, patients):
    governor.register_insurance_listener(patients.set_insurance_level)
    governor.set_insurance_level(InsuranceLevel.MINIMAL)
    assert patients.profile().insurance_level == InsuranceLevel.MINIMAL
