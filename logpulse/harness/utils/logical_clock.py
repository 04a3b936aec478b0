"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone

COUNTER_MODULUS = 1000


@dataclass
class ClockState:
    last_millisecond_key: str = ""
    counter: int = 0


def _to_utc(instant: datetime | None) -> datetime:
    if instant is None:
        return datetime.now(timezone.utc)
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def render_millis(instant: datetime | None) -> str:
    value = _to_utc(instant)
    return value.replace(tzinfo=None).isoformat(timespec="milliseconds")


class LogicalClock:
    """Stamps events so that ones sharing a wall-clock millisecond still sort in call order.

    The sub-millisecond digits of the returned timestamp carry a counter that resets
    whenever the millisecond changes. Past 999 collisions on one millisecond the
    counter wraps and ordering is no longer guaranteed.
    """

    def __init__(self) -> None:
        self._state = ClockState()
        self._lock = threading.Lock()

    @property
    def state(self) -> ClockState:
        with self._lock:
            return ClockState(self._state.last_millisecond_key, self._state.counter)

    def stamp(self, instant: datetime | None = None) -> str:
        rendered = render_millis(instant)
        with self._lock:
            state = self._state
            if rendered == state.last_millisecond_key:
                state.counter = (state.counter + 1) % COUNTER_MODULUS
            else:
                state.counter = 0
                state.last_millisecond_key = rendered
            counter = state.counter
        return f"{rendered}{counter:03d}Z"
