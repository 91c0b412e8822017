"""Event Bus: synchronous publish/subscribe for simulated time events.

Invariants:
    - Listeners are called in registration order, each at most once per dispatch
    - Dispatch iterates a snapshot taken under the lock; a listener registered
      during dispatch is not called in that dispatch
    - A failing listener is logged and skipped, delivery continues
    - The lock is never held while listeners run

Design Decisions:
    - Listeners are plain callables fn(event, days_advanced); TimeEventListener is a
      Protocol so bound methods and functions both qualify
"""

import logging
import threading
from typing import Protocol

from medsim.core.domain_types import TimeEvent

logger = logging.getLogger(__name__)


class TimeEventListener(Protocol):
    """Structural contract for anything that reacts to time events."""
    def __call__(self, event: TimeEvent, days_advanced: int) -> None: ...


def _listener_name(listener: TimeEventListener) -> str:
    return getattr(listener, "__qualname__", None) or type(listener).__name__


class EventBus:
    """Ordered subscriber registry with failure isolation."""

    def __init__(self):
        self._lock = threading.Lock()
        self._listeners: list[TimeEventListener] = []

    def register(self, listener: TimeEventListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unregister(self, listener: TimeEventListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def publish(self, event: TimeEvent, days_advanced: int) -> int:
        """Deliver to every subscriber. Returns number of failed listeners."""
        with self._lock:
            snapshot = list(self._listeners)
        failures = 0
        for listener in snapshot:
            try:
                listener(event, days_advanced)
            except Exception as e:
                failures += 1
                logger.error(
                    f"Time event listener failed on {event.value}: {e}",
                    exc_info=True,
                    extra={
                        "event": event.value,
                        "listener": _listener_name(listener),
                    },
                )
        return failures
