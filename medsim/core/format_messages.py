"""Notification Messages: user-facing text appended to the ledger's log.

Invariants:
    - All functions are pure (no IO, no clock reads)
    - Dates rendered as ISO strings
"""

from datetime import date

from medsim.core.appointment import Appointment


def _iso(value: date) -> str:
    return value.isoformat()


def appointment_added(appointment: Appointment) -> str:
    return f"Appointment added: {appointment}"


def appointment_cancelled(appointment: Appointment) -> str:
    return (
        f"Appointment cancelled for {appointment.patient} "
        f"on {_iso(appointment.date)}"
    )


def appointment_rescheduled(appointment: Appointment, new_date: date) -> str:
    return f"Appointment for {appointment.patient} rescheduled to {_iso(new_date)}"


def doctor_unavailable(appointment: Appointment) -> str:
    return (
        f"Doctor unavailable: cancelled appointment for {appointment.patient} "
        f"on {_iso(appointment.date)}"
    )


def auto_rescheduled(appointment: Appointment) -> str:
    return f"Appointment rescheduled to {_iso(appointment.date)} for {appointment.patient}"


def patient_reported_ill(appointment: Appointment) -> str:
    return (
        f"Patient reported illness for appointment on {_iso(appointment.date)} "
        f"for {appointment.patient}"
    )


def follow_up_created(appointment: Appointment) -> str:
    return (
        f"USER_ILL: created follow-up appointment on {_iso(appointment.date)} "
        f"for {appointment.patient}"
    )


def moved_to_history(count: int) -> str:
    noun = "appointment" if count == 1 else "appointments"
    return f"{count} {noun} moved to history"
