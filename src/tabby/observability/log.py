"""Event log — bounded store of build and reload events.

The builder appends from a worker thread while ``/_stats`` reads from the
event loop, so every access goes through one lock.
"""

import threading
from collections import Counter, deque
from typing import Any

from tabby.observability.events import StackEvent


class EventLog:
    """Ring buffer of the most recent ``StackEvent`` objects.

    Args:
        max_events: Oldest events are dropped beyond this many.

    """

    __slots__ = ("_events", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._events: deque[StackEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: StackEvent) -> None:
        with self._lock:
            self._events.append(event)

    def recent(self, n: int = 20, *, kind: type | None = None) -> list[StackEvent]:
        """Return up to *n* of the newest events (oldest first), optionally of one type."""
        with self._lock:
            events = list(self._events)
        if kind is not None:
            events = [e for e in events if isinstance(e, kind)]
        return events[-n:] if n > 0 else []

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Counts per event type and per build kind."""
        with self._lock:
            events = list(self._events)
            capacity = self._events.maxlen

        return {
            "total": len(events),
            "max_events": capacity,
            "by_type": dict(Counter(type(e).__name__ for e in events)),
            "build_kinds": dict(Counter(e.kind for e in events if hasattr(e, "kind"))),
        }
