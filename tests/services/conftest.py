"""Service test fixtures: event recorders for the clock and governor.

Invariants:
    - Recorders only append; assertions read their lists after the call under test
"""

import pytest


class EventRecorder:
    """TimeEventListener that keeps every (event, days_advanced) pair."""

    def __init__(self):
        self.events = []

    def __call__(self, event, days_advanced):
        self.events.append((event, days_advanced))


class FeatureRecorder:
    """Feature listener that keeps every (added, removed) pair."""

    def __init__(self):
        self.calls = []

    def __call__(self, added, removed):
        self.calls.append((added, removed))


@pytest.fixture
def events() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def feature_calls() -> FeatureRecorder:
    return FeatureRecorder()
