"""Appointment Book: in-memory appointment state machine, no IO, no locks.

Invariants:
    - future is sorted ascending by date; equal dates keep insertion order
    - past only grows; entries in past are terminal (is_history=True)
    - notifications are newest first
    - Entries are frozen records; a transition replaces the list slot

Design Decisions:
    - Dataclass with mutation methods, like the other in-memory state holders:
      the ledger service adds locking, logging and feature policy around it
    - bisect.insort (insert-right) keeps ties in insertion order without a counter
"""

import bisect
from dataclasses import dataclass, field, replace
from datetime import date

from medsim.core.appointment import Appointment, Notification
from medsim.core.domain_types import AppointmentId, NotificationId, RESULT_COMPLETED


def _by_date(appointment: Appointment) -> date:
    return appointment.date


@dataclass
class AppointmentBook:
    """Future/past appointment lists and the notification log."""

    future: list[Appointment] = field(default_factory=list)
    past: list[Appointment] = field(default_factory=list)
    notifications: list[Notification] = field(default_factory=list)

    # --- Queries ---------------------------------------------------------------

    def index_of(self, appointment_id: AppointmentId) -> int | None:
        for i, appointment in enumerate(self.future):
            if appointment.id == appointment_id:
                return i
        return None

    def first_active_index(self) -> int | None:
        """Earliest non-cancelled future appointment."""
        for i, appointment in enumerate(self.future):
            if not appointment.cancelled:
                return i
        return None

    def notification_index(self, notification_id: NotificationId) -> int | None:
        for i, notification in enumerate(self.notifications):
            if notification.id == notification_id:
                return i
        return None

    @property
    def unread(self) -> list[Notification]:
        return [n for n in self.notifications if not n.read]

    # --- Transitions -----------------------------------------------------------

    def insert(self, appointment: Appointment) -> None:
        bisect.insort(self.future, appointment, key=_by_date)

    def replace_at(self, index: int, appointment: Appointment) -> None:
        """Swap a slot in place. Caller guarantees the date did not change."""
        self.future[index] = appointment

    def move(self, index: int, new_date: date) -> Appointment:
        """Re-date an entry; it sorts after existing entries on the new date."""
        moved = self.future.pop(index).with_date(new_date)
        self.insert(moved)
        return moved

    def retire(self, index: int) -> Appointment:
        """Take a future entry out of the schedule and file it as history."""
        retired = replace(self.future.pop(index), is_history=True)
        self.past.append(retired)
        return retired

    def move_elapsed(self, today: date) -> list[Appointment]:
        """Move every future entry dated strictly before today into past."""
        remaining: list[Appointment] = []
        moved: list[Appointment] = []
        for appointment in self.future:
            if appointment.date >= today:
                remaining.append(appointment)
            elif appointment.cancelled:
                moved.append(replace(appointment, is_history=True))
            else:
                moved.append(replace(
                    appointment, is_history=True, result=RESULT_COMPLETED,
                ))
        self.future = remaining
        self.past.extend(moved)
        return moved

    def push_notification(self, notification: Notification) -> None:
        self.notifications.insert(0, notification)

    def clear_notifications(self) -> int:
        count = len(self.notifications)
        self.notifications.clear()
        return count
