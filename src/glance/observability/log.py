"""Event log — queryable, thread-safe event store.

Stores a bounded ring buffer of ``LiveEvent`` objects for inspection.

Thread Safety:
    All methods are protected by a ``threading.Lock``.  Safe for
    concurrent reads and writes from the watcher and request handlers.

"""

import threading
from collections import deque
from typing import Any

from glance.observability.events import LiveEvent


class EventLog:
    """Bounded event store with query support.

    Events are stored in a ring buffer (deque with maxlen).  When the
    buffer is full, the oldest events are discarded automatically.

    Args:
        max_events: Maximum number of events to retain.

    """

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 1_000) -> None:
        self._max_events = max_events
        self._events: deque[LiveEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: LiveEvent) -> None:
        """Record an event in the log."""
        with self._lock:
            self._events.append(event)

    def query(self, *, event_type: type | None = None, limit: int = 100) -> list[LiveEvent]:
        """Return matching events, most recent first."""
        with self._lock:
            results: list[LiveEvent] = []
            for event in reversed(self._events):
                if len(results) >= limit:
                    break
                if event_type is not None and not isinstance(event, event_type):
                    continue
                results.append(event)
            return results

    def recent(self, n: int = 20) -> list[LiveEvent]:
        """Return the N most recent events."""
        with self._lock:
            items = list(self._events)
        return items[-n:]

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Return summary statistics about stored events."""
        with self._lock:
            events = list(self._events)

        type_counts: dict[str, int] = {}
        for event in events:
            name = type(event).__name__
            type_counts[name] = type_counts.get(name, 0) + 1

        return {
            "total": len(events),
            "max_events": self._max_events,
            "by_type": type_counts,
        }
