"""Source layer — reading, rendering, and watching the Markdown document."""

from glance.source.reader import WatchTarget, load_source, read_source
from glance.source.renderer import render_markdown
from glance.source.watcher import (
    ChangeDetector,
    NotifyDetector,
    PollingDetector,
    SourceWatcher,
    select_detectors,
)

__all__ = [
    "ChangeDetector",
    "NotifyDetector",
    "PollingDetector",
    "SourceWatcher",
    "WatchTarget",
    "load_source",
    "read_source",
    "render_markdown",
    "select_detectors",
]
