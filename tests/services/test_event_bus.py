"""Event Bus: ordered delivery with failure isolation."""

from medsim.core.domain_types import TimeEvent
from medsim.services.event_bus import EventBus


def test_delivers_in_registration_order():
    bus = EventBus()
    order = []
    bus.register(lambda e, d: order.append("first"))
    bus.register(lambda e, d: order.append("second"))
    bus.publish(TimeEvent.DAY_PASSED, 1)
    assert order == ["first", "second"]


def test_register_is_deduplicated(events):
    bus = EventBus()
    bus.register(events)
    bus.register(events)
    assert bus.listener_count == 1
    bus.publish(TimeEvent.DAY_PASSED, 1)
    assert events.events == [(TimeEvent.DAY_PASSED, 1)]


def test_unregister_stops_delivery(events):
    bus = EventBus()
    bus.register(events)
    bus.unregister(events)
    bus.publish(TimeEvent.DAY_PASSED, 1)
    assert events.events == []


def test_failing_listener_is_isolated(events):
    bus = EventBus()

    def broken(event, days):
        raise RuntimeError("listener bug")

    bus.register(broken)
    bus.register(events)
    failures = bus.publish(TimeEvent.USER_ILL, 0)
    assert failures == 1
    assert events.events == [(TimeEvent.USER_ILL, 0)]


def test_listener_registered_during_dispatch_waits_for_next(events):
    bus = EventBus()

    def registers_another(event, days):
        bus.register(events)

    bus.register(registers_another)
    bus.publish(TimeEvent.DAY_PASSED, 1)
    assert events.events == []
    bus.publish(TimeEvent.DAY_PASSED, 1)
    assert events.events == [(TimeEvent.DAY_PASSED, 1)]
