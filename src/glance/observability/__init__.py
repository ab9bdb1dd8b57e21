"""Observability — an in-memory record of what the live engine did.

Collects events from:
- **Watcher**: refresh cycles, read failures, detector degradation
- **Cache**: committed artifacts and how many viewers were told
- **Streams**: viewers connecting and disconnecting

All events are frozen dataclasses with nanosecond timestamps, safe for
concurrent production from the watcher task and request handlers.

Quick Start:
    >>> from glance.observability import EventLog, LiveCollector
    >>> collector = LiveCollector(EventLog())
    >>> collector.record_commit("README.md", 2, clients_notified=1)

"""

from glance.observability.collector import LiveCollector
from glance.observability.events import (
    ArtifactCommitted,
    LiveEvent,
    SourceReadFailed,
    ViewerEvent,
    WatcherDegraded,
    now_ns,
)
from glance.observability.log import EventLog

__all__ = [
    "ArtifactCommitted",
    "EventLog",
    "LiveCollector",
    "LiveEvent",
    "SourceReadFailed",
    "ViewerEvent",
    "WatcherDegraded",
    "now_ns",
]
