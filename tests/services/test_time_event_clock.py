"""Time Event Clock: day counter and event emission order.

Invariants:
    - Stochastic events are scripted through ScriptedRandom: two draws per day,
      doctor first, then illness

Tests cover:
    - advance_days(n<=0) is a no-op
    - advance_days(10) emits 10 DAY_PASSED then one WEEK_PASSED(1)
    - Scripted doctor/ill draws land after that day's DAY_PASSED
    - trigger_event does not move the counter
    - Listener failure does not stop the clock
"""

import threading
from datetime import date

import pytest

from medsim.core.domain_types import TimeEvent
from medsim.services.time_event_clock import TimeEventClock

EPOCH = date(2025, 1, 1)


def test_starts_at_day_zero(clock):
    assert clock.current_day() == 0
    assert clock.current_date() == date(2025, 1, 1)


@pytest.mark.parametrize("days", [0, -3])
def test_non_positive_advance_is_noop(clock, events, days):
    clock.register_listener(events)
    clock.advance_days(days)
    assert clock.current_day() == 0
    assert events.events == []


def test_advance_ten_days_event_sequence(clock, events):
    clock.register_listener(events)
    clock.advance_days(10)
    assert clock.current_day() == 10
    assert events.events == [(TimeEvent.DAY_PASSED, 1)] * 10 + [(TimeEvent.WEEK_PASSED, 1)]


def test_advance_six_days_emits_no_week(clock, events):
    clock.register_listener(events)
    clock.advance_days(6)
    assert TimeEvent.WEEK_PASSED not in [e for e, _ in events.events]


def test_advance_fifteen_days_reports_two_weeks(clock, events):
    clock.register_listener(events)
    clock.advance_days(15)
    assert events.events[-1] == (TimeEvent.WEEK_PASSED, 2)
    assert sum(1 for e, _ in events.events if e == TimeEvent.WEEK_PASSED) == 1


def test_advance_week(clock, events):
    clock.register_listener(events)
    clock.advance_week()
    assert clock.current_day() == 7
    assert events.events[-1] == (TimeEvent.WEEK_PASSED, 1)


def test_scripted_doctor_then_ill_follow_day_passed(events, scripted_rng):
    # day 1: doctor fires, ill fires; day 2: neither
    clock = TimeEventClock(epoch=EPOCH, rng=scripted_rng([0.0, 0.0, 0.99, 0.99]))
    clock.register_listener(events)
    clock.advance_days(2)
    assert events.events == [
        (TimeEvent.DAY_PASSED, 1),
        (TimeEvent.DOCTOR_UNAVAILABLE, 0),
        (TimeEvent.USER_ILL, 0),
        (TimeEvent.DAY_PASSED, 1),
    ]


def test_two_draws_per_day(scripted_rng):
    rng = scripted_rng()
    clock = TimeEventClock(epoch=EPOCH, rng=rng)
    clock.advance_days(3)
    assert rng.calls == 6


def test_probability_thresholds_are_strict(scripted_rng):
    rng = scripted_rng([0.10, 0.06])
    clock = TimeEventClock(epoch=EPOCH, rng=rng)
    seen = []
    clock.register_listener(lambda e, d: seen.append(e))
    clock.advance_days(1)
    assert seen == [TimeEvent.DAY_PASSED]


def test_trigger_event_keeps_counter(clock, events):
    clock.register_listener(events)
    clock.trigger_event(TimeEvent.MANUAL_TRIGGER)
    assert clock.current_day() == 0
    assert events.events == [(TimeEvent.MANUAL_TRIGGER, 0)]


def test_listener_sees_new_day_on_day_passed(clock):
    days_seen = []
    clock.register_listener(lambda e, d: days_seen.append(clock.current_day()))
    clock.advance_days(3)
    assert days_seen == [1, 2, 3]


def test_failing_listener_does_not_stop_clock(clock, events):
    def broken(event, days):
        raise RuntimeError("boom")

    clock.register_listener(broken)
    clock.register_listener(events)
    clock.advance_days(2)
    assert clock.current_day() == 2
    assert len(events.events) == 2


def test_unregister_listener(clock, events):
    clock.register_listener(events)
    clock.unregister_listener(events)
    clock.advance_days(1)
    assert events.events == []


def test_date_for_day(clock):
    assert clock.date_for_day(31) == date(2025, 2, 1)


def test_concurrent_advances_are_serialized(clock):
    seen = []
    clock.register_listener(lambda e, d: seen.append(clock.current_day()))
    threads = [threading.Thread(target=clock.advance_days, args=(5,)) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert clock.current_day() == 20
    assert seen == sorted(seen)
