"""Live collector — records engine events into the event log.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.
    Safe for concurrent use from the watcher task and request handlers.

"""

from __future__ import annotations

from typing import Literal

from glance.observability.events import (
    ArtifactCommitted,
    SourceReadFailed,
    ViewerEvent,
    WatcherDegraded,
    now_ns,
)
from glance.observability.log import EventLog


class LiveCollector:
    """Event collector for the live-sync engine.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_commit(
        self,
        source: str,
        version: int,
        *,
        render_ms: float = 0.0,
        clients_notified: int = 0,
    ) -> None:
        """Record a committed artifact."""
        self._log.append(
            ArtifactCommitted(
                source=source,
                version=version,
                render_ms=render_ms,
                clients_notified=clients_notified,
                timestamp_ns=now_ns(),
            )
        )

    def record_read_failure(self, path: str, error: str) -> None:
        """Record a skipped refresh cycle."""
        self._log.append(SourceReadFailed(path=path, error=error, timestamp_ns=now_ns()))

    def record_degraded(
        self,
        path: str,
        detector: str,
        fallback: str | None,
        reason: str,
    ) -> None:
        """Record a change-detector failure."""
        self._log.append(
            WatcherDegraded(
                path=path,
                detector=detector,
                fallback=fallback,
                reason=reason,
                timestamp_ns=now_ns(),
            )
        )

    def record_viewer(self, kind: Literal["connected", "disconnected"], subscribers: int) -> None:
        """Record a viewer connecting to or leaving the event stream."""
        self._log.append(
            ViewerEvent(
                kind=kind,
                subscribers=subscribers,
                timestamp_ns=now_ns(),
            )
        )
