"""Appointment and Notification records.

Invariants:
    - Both records are frozen; every change produces a new value via dataclasses.replace
    - Appointment.id never changes, rescheduling keeps it
    - state is derived from the flags: history wins over cancelled
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import date

from medsim.core.domain_types import AppointmentId, AppointmentState, NotificationId


def new_appointment_id() -> AppointmentId:
    return AppointmentId(uuid.uuid4())


def new_notification_id() -> NotificationId:
    return NotificationId(str(uuid.uuid4()))


@dataclass(frozen=True)
class Appointment:
    """A patient visit on a simulated calendar date."""

    date: date
    patient: str
    staff: str | None = None
    id: AppointmentId = field(default_factory=new_appointment_id)
    cancelled: bool = False
    is_history: bool = False
    result: str = ""

    @property
    def state(self) -> AppointmentState:
        if self.is_history:
            return AppointmentState.HISTORY
        if self.cancelled:
            return AppointmentState.CANCELLED
        return AppointmentState.SCHEDULED

    def with_date(self, new_date: date) -> "Appointment":
        return replace(self, date=new_date)

    def cancel(self) -> "Appointment":
        return replace(self, cancelled=True)

    def annotate(self, result: str) -> "Appointment":
        return replace(self, result=result)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "date": self.date.isoformat(),
            "patient": self.patient,
            "staff": self.staff,
            "cancelled": self.cancelled,
            "is_history": self.is_history,
            "result": self.result,
            "state": self.state.value,
        }

    def __str__(self) -> str:
        flags = (", CANCELLED" if self.cancelled else "") + (", HISTORY" if self.is_history else "")
        return (
            f"Appointment{{id={self.id}, date={self.date.isoformat()}, "
            f"patient={self.patient}, staff={self.staff}{flags}}}"
        )


@dataclass(frozen=True)
class Notification:
    """Entry in the ledger's notification log."""

    message: str
    created_on: date
    day: int = 0
    id: NotificationId = field(default_factory=new_notification_id)
    read: bool = False

    def mark_read(self) -> "Notification":
        return replace(self, read=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "message": self.message,
            "created_on": self.created_on.isoformat(),
            "day": self.day,
            "read": self.read,
        }
