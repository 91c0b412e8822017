"""Time Event Clock: simulated day counter that drives the event bus.

Invariants:
    - current_day starts at 0 and only ever increases, one step per simulated day
    - advance_days(n) with n <= 0 changes nothing and emits nothing
    - Per day: DAY_PASSED(1), then maybe DOCTOR_UNAVAILABLE(0), then maybe USER_ILL(0)
    - After the loop, n >= 7 emits exactly one WEEK_PASSED(n // 7)
    - trigger_event emits with payload 0 and never touches the counter
    - Whole advance_days calls are serialized; listener failures never affect the counter

Design Decisions:
    - Random source injected (anything with random() -> float) so tests can script it
    - Two locks: _lock guards the counter briefly (readers never wait on a dispatch),
      _advance_lock makes one advance_days call a single critical section
"""

import logging
import random
import threading
from datetime import date, timedelta
from typing import Protocol

from medsim.core.domain_types import TimeEvent
from medsim.services.event_bus import EventBus, TimeEventListener

logger = logging.getLogger(__name__)

DEFAULT_DOCTOR_UNAVAILABLE_PROBABILITY = 0.10
DEFAULT_USER_ILL_PROBABILITY = 0.06
DAYS_PER_WEEK = 7


class RandomSource(Protocol):
    """Anything that yields floats in [0, 1). random.Random qualifies."""
    def random(self) -> float: ...


class TimeEventClock:
    """Owns the simulated calendar and emits time events."""

    def __init__(
        self,
        epoch: date = date(2025, 1, 1),
        rng: RandomSource | None = None,
        doctor_unavailable_probability: float = DEFAULT_DOCTOR_UNAVAILABLE_PROBABILITY,
        user_ill_probability: float = DEFAULT_USER_ILL_PROBABILITY,
        bus: EventBus | None = None,
    ):
        self._epoch = epoch
        self._rng = rng if rng is not None else random.Random()
        self._p_doctor = doctor_unavailable_probability
        self._p_ill = user_ill_probability
        self._bus = bus if bus is not None else EventBus()
        self._lock = threading.Lock()
        self._advance_lock = threading.RLock()
        self._day = 0

    # --- Queries ---------------------------------------------------------------

    def current_day(self) -> int:
        with self._lock:
            return self._day

    def current_date(self) -> date:
        return self._epoch + timedelta(days=self.current_day())

    def date_for_day(self, day: int) -> date:
        """Calendar date of a simulated day number."""
        return self._epoch + timedelta(days=day)

    @property
    def epoch(self) -> date:
        return self._epoch

    @property
    def bus(self) -> EventBus:
        return self._bus

    # --- Subscription ----------------------------------------------------------

    def register_listener(self, listener: TimeEventListener) -> None:
        self._bus.register(listener)

    def unregister_listener(self, listener: TimeEventListener) -> None:
        self._bus.unregister(listener)

    # --- Time control ----------------------------------------------------------

    def advance_days(self, days: int) -> None:
        """Advance the calendar day by day, emitting events as it goes."""
        if days <= 0:
            return
        with self._advance_lock:
            for _ in range(days):
                with self._lock:
                    self._day += 1
                    day = self._day
                self._emit(TimeEvent.DAY_PASSED, 1, day)

                # DOCTOR_UNAVAILABLE is always evaluated before USER_ILL
                if self._rng.random() < self._p_doctor:
                    self._emit(TimeEvent.DOCTOR_UNAVAILABLE, 0, day)
                if self._rng.random() < self._p_ill:
                    self._emit(TimeEvent.USER_ILL, 0, day)

            if days >= DAYS_PER_WEEK:
                self._emit(TimeEvent.WEEK_PASSED, days // DAYS_PER_WEEK, self.current_day())
        logger.info(
            f"Advanced {days} day(s), now day {self.current_day()}",
            extra={"days_advanced": days, "day": self.current_day()},
        )

    def advance_week(self) -> None:
        self.advance_days(DAYS_PER_WEEK)

    def trigger_event(self, event: TimeEvent) -> None:
        """Emit a named event now, bypassing the counter."""
        self._emit(event, 0, self.current_day())

    def _emit(self, event: TimeEvent, days_advanced: int, day: int) -> None:
        logger.debug(
            f"Emitting {event.value} ({days_advanced})",
            extra={"event": event.value, "days_advanced": days_advanced, "day": day},
        )
        self._bus.publish(event, days_advanced)
