"""Root conftest: shared fixtures for the simulated calendar and services.

Invariants:
    - No test depends on real randomness; clocks get a ScriptedRandom
    - Every test builds fresh service instances (no shared state between tests)
"""

from datetime import date, timedelta

import pytest

from medsim.services.appointment_ledger import AppointmentLedger
from medsim.services.feature_governor import FeatureGovernor
from medsim.services.time_event_clock import TimeEventClock

EPOCH = date(2025, 1, 1)


def day(n: int) -> date:
    """Calendar date of simulated day n."""
    return EPOCH + timedelta(days=n)


class ScriptedRandom:
    """Deterministic stand-in for random.Random: replays values, then a default."""

    def __init__(self, values=(), default: float = 0.99):
        self._values = list(values)
        self._default = default
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self._values:
            return self._values.pop(0)
        return self._default


@pytest.fixture
def quiet_rng() -> ScriptedRandom:
    """Never fires stochastic events."""
    return ScriptedRandom(default=0.99)


@pytest.fixture
def scripted_rng():
    """Factory: ScriptedRandom replaying the given draws."""
    return ScriptedRandom


@pytest.fixture
def clock(quiet_rng) -> TimeEventClock:
    return TimeEventClock(epoch=EPOCH, rng=quiet_rng)


@pytest.fixture
def on_day():
    """Factory: calendar date of simulated day n."""
    return day


@pytest.fixture
def governor() -> FeatureGovernor:
    return FeatureGovernor()


@pytest.fixture
def ledger(clock, governor) -> AppointmentLedger:
    ledger = AppointmentLedger(clock, is_feature_active=governor.is_active)
    clock.register_listener(ledger.on_time_event)
    return ledger
