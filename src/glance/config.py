"""Glance configuration.

GlanceConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass
from pathlib import Path

from glance._errors import ConfigError
from glance._types import WatchMode

_WATCH_MODES: frozenset[str] = frozenset({"auto", "native", "poll"})


@dataclass(frozen=True, slots=True)
class GlanceConfig:
    """Configuration for a Glance preview.

    Attributes:
        source: Markdown file to preview. ``None`` means the content comes
            from the clipboard (``clipboard=True``) or, in static mode, stdin.
            Always resolved to an absolute path on construction.
        host: Bind address for the live server.
        port: Bind port for the live server.
        static: Render once to a temporary file instead of serving.
        clipboard: Take the Markdown from the system clipboard.
        open_browser: Open the preview in the default browser on start.
        watch_mode: ``"native"`` OS events, ``"poll"`` stat polling, or
            ``"auto"`` to pick per platform.
        poll_interval_ms: Polling period when the polling detector is used.
        debounce_ms: Window for grouping a burst of filesystem events into
            one change.
        heartbeat_interval: Seconds of idle time before a keep-alive comment
            is written to an open event stream.
        mailbox_capacity: Pending reload signals kept per viewer before the
            oldest is dropped.

    """

    source: Path | None = None
    host: str = "127.0.0.1"
    port: int = 3030
    static: bool = False
    clipboard: bool = False
    open_browser: bool = True
    watch_mode: WatchMode = "auto"
    poll_interval_ms: int = 500
    debounce_ms: int = 300
    heartbeat_interval: float = 15.0
    mailbox_capacity: int = 16

    def __post_init__(self) -> None:
        if self.source is not None:
            source = Path(self.source)
            if not source.is_absolute():
                source = source.resolve()
            object.__setattr__(self, "source", source)

        if self.source is not None and self.clipboard:
            msg = (
                "Cannot use both a file and the clipboard flag at the same time. "
                "Provide either a file or --clipboard, but not both."
            )
            raise ConfigError(msg)
        if not 0 <= self.port <= 65535:
            msg = f"Port must be between 0 and 65535, got {self.port}"
            raise ConfigError(msg)
        if self.watch_mode not in _WATCH_MODES:
            msg = f"Unknown watch mode {self.watch_mode!r} (expected one of {sorted(_WATCH_MODES)})"
            raise ConfigError(msg)
        if self.poll_interval_ms <= 0:
            msg = f"poll_interval_ms must be positive, got {self.poll_interval_ms}"
            raise ConfigError(msg)
        if self.debounce_ms < 0:
            msg = f"debounce_ms must not be negative, got {self.debounce_ms}"
            raise ConfigError(msg)
        # chirp's EventStream rejects heartbeats outside [1, 300] seconds.
        if not 1.0 <= self.heartbeat_interval <= 300.0:
            msg = f"heartbeat_interval must be within 1..300 seconds, got {self.heartbeat_interval}"
            raise ConfigError(msg)
        if self.mailbox_capacity < 1:
            msg = f"mailbox_capacity must be at least 1, got {self.mailbox_capacity}"
            raise ConfigError(msg)
