"""Notification Messages: pure text builders for the ledger's log.

Tests cover:
    - Every builder names the patient and the ISO date it refers to
    - moved_to_history pluralizes
"""

from datetime import date

from medsim.core import format_messages as messages
from medsim.core.appointment import Appointment


def _make_appointment(**overrides) -> Appointment:
    fields = {"date": date(2025, 1, 4), "patient": "Bob", "staff": "DrY"}
    fields.update(overrides)
    return Appointment(**fields)


def test_appointment_added_embeds_record():
    appt = _make_appointment()
    assert messages.appointment_added(appt) == f"Appointment added: {appt}"


def test_appointment_cancelled():
    assert messages.appointment_cancelled(_make_appointment()) == (
        "Appointment cancelled for Bob on 2025-01-04"
    )


def test_appointment_rescheduled_uses_new_date():
    text = messages.appointment_rescheduled(_make_appointment(), date(2025, 2, 1))
    assert text == "Appointment for Bob rescheduled to 2025-02-01"


def test_doctor_unavailable():
    assert messages.doctor_unavailable(_make_appointment()) == (
        "Doctor unavailable: cancelled appointment for Bob on 2025-01-04"
    )


def test_auto_rescheduled():
    text = messages.auto_rescheduled(_make_appointment(date=date(2025, 1, 5)))
    assert text == "Appointment rescheduled to 2025-01-05 for Bob"


def test_patient_reported_ill():
    assert messages.patient_reported_ill(_make_appointment()) == (
        "Patient reported illness for appointment on 2025-01-04 for Bob"
    )


def test_follow_up_created():
    text = messages.follow_up_created(_make_appointment(date=date(2025, 1, 11)))
    assert text.startswith("USER_ILL: created follow-up appointment on 2025-01-11")


def test_moved_to_history_pluralizes():
    assert messages.moved_to_history(1) == "1 appointment moved to history"
    assert messages.moved_to_history(3) == "3 appointments moved to history"
