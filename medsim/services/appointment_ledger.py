"""Appointment Ledger: owns appointments and notifications, reacts to time events.

Invariants:
    - Every mutation and every read runs under one RLock per ledger
    - Reads return new lists of frozen records, never live references
    - cancel/reschedule return Outcome; NotFound, AlreadyCancelled and
      CancelledAppointment are values, not exceptions
    - Elapsed appointments leave future and enter past in one critical section
    - Feature state is read through an immutable query, never under the governor's lock

Design Decisions:
    - The ledger is a plain TimeEventListener (on_time_event); the composition root
      subscribes it, the ledger never reaches for the clock's bus itself
    - DOCTOR_UNAVAILABLE targets the earliest non-cancelled entry while USER_ILL targets
      the head regardless of cancellation. The two rules differ on purpose.
    - With AUTOMATIC_RESCHEDULING, USER_ILL files the cancelled head straight into
      past, so the next illness event reaches the next appointment
"""

import logging
import threading
from datetime import date, timedelta
from typing import Callable, Protocol
from uuid import UUID

from medsim.core import format_messages as messages
from medsim.core.appointment import Appointment, Notification
from medsim.core.appointment_book import AppointmentBook
from medsim.core.domain_types import (
    AppointmentId,
    FeatureId,
    NotificationId,
    RESULT_PATIENT_ILL,
    TimeEvent,
)
from medsim.core.errors import (
    AlreadyCancelledError,
    CancelledAppointmentError,
    NotFoundError,
)
from medsim.core.outcome import Outcome

logger = logging.getLogger(__name__)

FeatureQuery = Callable[[FeatureId], bool]


class Calendar(Protocol):
    """What the ledger needs from the clock."""
    def current_day(self) -> int: ...
    def current_date(self) -> date: ...


def _coerce_id(appointment_id: "AppointmentId | UUID | str") -> AppointmentId | None:
    if isinstance(appointment_id, UUID):
        return AppointmentId(appointment_id)
    try:
        return AppointmentId(UUID(str(appointment_id)))
    except ValueError:
        return None


class AppointmentLedger:
    """Future/past appointments and the notification log."""

    def __init__(
        self,
        calendar: Calendar,
        is_feature_active: FeatureQuery = lambda feature: False,
        doctor_reschedule_days: int = 1,
        follow_up_days: int = 7,
    ):
        self._lock = threading.RLock()
        self._calendar = calendar
        self._is_feature_active = is_feature_active
        self._doctor_reschedule = timedelta(days=doctor_reschedule_days)
        self._follow_up = timedelta(days=follow_up_days)
        self._book = AppointmentBook()

    # --- Commands ----------------------------------------------------------------

    def add(self, patient: str, staff: str | None, when: date) -> Appointment:
        """Schedule a new appointment in the future list."""
        appointment = Appointment(date=when, patient=patient, staff=staff)
        with self._lock:
            self._book.insert(appointment)
            logger.info(
                f"Appointment added: {appointment}",
                extra={"appointment_id": str(appointment.id)},
            )
            self._notify(messages.appointment_added(appointment))
        return appointment

    def cancel_by_id(self, appointment_id: "AppointmentId | UUID | str") -> Outcome[Appointment]:
        resolved = _coerce_id(appointment_id)
        with self._lock:
            index = self._book.index_of(resolved) if resolved is not None else None
            if index is None:
                logger.error(
                    f"cancel_by_id: not found {appointment_id}",
                    extra={"appointment_id": str(appointment_id)},
                )
                return Outcome.failure(NotFoundError("Appointment", str(appointment_id)))

            current = self._book.future[index]
            if current.cancelled:
                logger.info(
                    f"cancel_by_id: already cancelled {current}",
                    extra={"appointment_id": str(current.id)},
                )
                return Outcome.failure(AlreadyCancelledError(str(current.id)))

            cancelled = current.cancel()
            self._book.replace_at(index, cancelled)
            logger.info(
                f"Cancelled appointment: {cancelled}",
                extra={"appointment_id": str(cancelled.id)},
            )
            self._notify(messages.appointment_cancelled(cancelled))
            return Outcome.success(cancelled)

    def reschedule_by_id(
        self, appointment_id: "AppointmentId | UUID | str", new_date: date,
    ) -> Outcome[Appointment]:
        resolved = _coerce_id(appointment_id)
        with self._lock:
            index = self._book.index_of(resolved) if resolved is not None else None
            if index is None:
                logger.error(
                    f"reschedule_by_id: not found {appointment_id}",
                    extra={"appointment_id": str(appointment_id)},
                )
                return Outcome.failure(NotFoundError("Appointment", str(appointment_id)))

            current = self._book.future[index]
            if current.cancelled:
                logger.error(
                    f"reschedule_by_id: appointment is cancelled {current}",
                    extra={"appointment_id": str(current.id)},
                )
                return Outcome.failure(CancelledAppointmentError(str(current.id)))

            moved = self._book.move(index, new_date)
            logger.info(
                f"Rescheduled appointment: {current} -> {moved}",
                extra={"appointment_id": str(moved.id)},
            )
            self._notify(messages.appointment_rescheduled(current, new_date))
            return Outcome.success(moved)

    # --- Queries -----------------------------------------------------------------

    def future_appointments(self) -> list[Appointment]:
        with self._lock:
            return list(self._book.future)

    def past_appointments(self) -> list[Appointment]:
        with self._lock:
            return list(self._book.past)

    def get(self, appointment_id: "AppointmentId | UUID | str") -> Appointment | None:
        resolved = _coerce_id(appointment_id)
        with self._lock:
            for appointment in (*self._book.future, *self._book.past):
                if appointment.id == resolved:
                    return appointment
        return None

    # --- Notifications -----------------------------------------------------------

    def notifications(self) -> list[Notification]:
        """Newest first."""
        with self._lock:
            return list(self._book.notifications)

    def unread_notifications(self) -> list[Notification]:
        with self._lock:
            return self._book.unread

    def mark_notification_read(self, notification_id: NotificationId | str) -> Outcome[Notification]:
        with self._lock:
            index = self._book.notification_index(NotificationId(str(notification_id)))
            if index is None:
                logger.error(f"mark_notification_read: not found {notification_id}")
                return Outcome.failure(NotFoundError("Notification", str(notification_id)))
            updated = self._book.notifications[index].mark_read()
            self._book.notifications[index] = updated
            return Outcome.success(updated)

    def clear_notifications(self) -> int:
        with self._lock:
            count = self._book.clear_notifications()
        logger.info(f"All notifications cleared ({count})")
        return count

    def _notify(self, message: str) -> Notification:
        # Caller holds the lock
        notification = Notification(
            message=message,
            created_on=self._calendar.current_date(),
            day=self._calendar.current_day(),
        )
        self._book.push_notification(notification)
        logger.debug(f"Notification added: {message}")
        return notification

    # --- Time events -------------------------------------------------------------

    def on_time_event(self, event: TimeEvent, days_advanced: int) -> None:
        """TimeEventListener entry point."""
        if event in (TimeEvent.DAY_PASSED, TimeEvent.WEEK_PASSED):
            logger.debug(
                f"Number of days passed: {days_advanced}",
                extra={"event": event.value, "days_advanced": days_advanced},
            )
            self._on_time_passed()
        elif event == TimeEvent.DOCTOR_UNAVAILABLE:
            self._on_doctor_unavailable()
        elif event == TimeEvent.USER_ILL:
            self._on_user_ill()
        elif event == TimeEvent.MANUAL_TRIGGER:
            logger.info("Manual trigger received", extra={"event": event.value})

    def _today(self) -> date:
        # The current simulated day has elapsed once the clock reports it
        return self._calendar.current_date() + timedelta(days=1)

    def _on_time_passed(self) -> None:
        with self._lock:
            moved = self._book.move_elapsed(self._today())
        if moved:
            logger.info(
                f"{messages.moved_to_history(len(moved))} due to time advance",
                extra={"day": self._calendar.current_day()},
            )

    def _on_doctor_unavailable(self) -> None:
        with self._lock:
            index = self._book.first_active_index()
            if index is None:
                logger.info("Doctor unavailable but no future appointments")
                return

            cancelled = self._book.future[index].cancel()
            self._book.replace_at(index, cancelled)
            logger.info(
                f"Doctor unavailable: cancelled appointment {cancelled}",
                extra={"appointment_id": str(cancelled.id)},
            )
            self._notify(messages.doctor_unavailable(cancelled))

            if self._is_feature_active(FeatureId.AUTOMATIC_RESCHEDULING):
                replacement = Appointment(
                    date=cancelled.date + self._doctor_reschedule,
                    patient=cancelled.patient,
                    staff=cancelled.staff,
                )
                self._book.insert(replacement)
                logger.info(
                    f"AUTOMATIC_RESCHEDULING: rescheduled to {replacement.date.isoformat()}",
                    extra={"appointment_id": str(replacement.id)},
                )
                self._notify(messages.auto_rescheduled(replacement))

    def _on_user_ill(self) -> None:
        with self._lock:
            if not self._book.future:
                logger.info("User ill event: no future appointments to update")
                return

            target = self._book.future[0].annotate(RESULT_PATIENT_ILL)
            self._notify(messages.patient_reported_ill(target))

            if not self._is_feature_active(FeatureId.AUTOMATIC_RESCHEDULING):
                self._book.replace_at(0, target)
                logger.info(
                    f"USER_ILL: annotated appointment {target}",
                    extra={"appointment_id": str(target.id)},
                )
                return

            self._book.replace_at(0, target.cancel())
            target = self._book.retire(0)
            follow_up = Appointment(
                date=target.date + self._follow_up,
                patient=target.patient,
                staff=target.staff,
            )
            self._book.insert(follow_up)
            logger.info(
                f"USER_ILL: created follow-up appointment on {follow_up.date.isoformat()}",
                extra={"appointment_id": str(follow_up.id)},
            )
            self._notify(messages.follow_up_created(follow_up))
