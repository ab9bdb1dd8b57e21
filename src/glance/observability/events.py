"""Event model for the live-sync engine.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Render events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ArtifactCommitted:
    """A new artifact replaced the current one in the render cache.

    Attributes:
        source: Display name of the rendered source.
        version: Version stamped on the committed artifact.
        render_ms: Time spent reading and rendering in milliseconds.
        clients_notified: Number of viewers that received the reload signal.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    source: str
    version: int
    render_ms: float
    clients_notified: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class SourceReadFailed:
    """A change was detected but the source could not be read or rendered.

    Attributes:
        path: Path of the source file.
        error: Error message.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    error: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Watcher events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class WatcherDegraded:
    """A change detector failed and the watcher moved on.

    Attributes:
        path: Watched source path.
        detector: Name of the detector that failed.
        fallback: Name of the detector taking over, or ``None`` when the
            document is now static.
        reason: Error message from the failed detector.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    detector: str
    fallback: str | None
    reason: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Viewer events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ViewerEvent:
    """A viewer opened or closed its event stream.

    Attributes:
        kind: ``"connected"`` or ``"disconnected"``.
        subscribers: Live subscriber count after the change.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    kind: Literal["connected", "disconnected"]
    subscribers: int
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type LiveEvent = ArtifactCommitted | SourceReadFailed | WatcherDegraded | ViewerEvent


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
