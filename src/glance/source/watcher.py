"""Source watcher — re-renders the document when its file changes.

Change detection is a capability with two implementations, both built on
watchfiles:

- ``NotifyDetector`` uses the OS notification API (inotify, FSEvents,
  ReadDirectoryChangesW).
- ``PollingDetector`` stats the file on a fixed interval, for network and
  virtualized filesystems where native events are unreliable.

Both watch the file's *parent directory* non-recursively and keep only
events for the file's own name.  Editors that save atomically (write a temp
file, then rename it over the original) replace the inode, which a watch on
the file itself would lose.

The watcher runs as a single asyncio task.  Each detected burst triggers
one refresh: read, hash, render, commit.  A refresh that fails to read or
render is logged and skipped; the previous artifact stays current and the
next event retries.
"""

from __future__ import annotations

import asyncio
import contextlib
import hashlib
import sys
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from glance._errors import WatchError
from glance._platform import running_under_wsl
from glance.live.cache import Artifact
from glance.source.reader import read_source
from glance.source.renderer import render_markdown

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable, Sequence
    from pathlib import Path

    from watchfiles import Change

    from glance.config import GlanceConfig
    from glance.live.cache import RenderCache
    from glance.observability.collector import LiveCollector
    from glance.source.reader import WatchTarget

# Batches of (change, path) pairs as yielded by watchfiles.
type ChangeBatch = set[tuple[Change, str]]


class ChangeDetector(Protocol):
    """Yields one batch per burst of changes to *path* until *stop_event* is set."""

    name: str

    def changes(self, path: Path, stop_event: asyncio.Event) -> AsyncGenerator[ChangeBatch]: ...


@dataclass(frozen=True, slots=True)
class _SameName:
    """watchfiles filter: only events for one file name in the watched directory."""

    name: str

    def __call__(self, change: Change, path: str) -> bool:
        return path.rsplit("/", 1)[-1].rsplit("\\", 1)[-1] == self.name


class NotifyDetector:
    """Native OS change notifications."""

    name = "native"

    def __init__(self, *, debounce_ms: int = 300, step_ms: int = 50) -> None:
        self._debounce_ms = debounce_ms
        self._step_ms = step_ms

    def changes(self, path: Path, stop_event: asyncio.Event) -> AsyncGenerator[ChangeBatch]:
        from watchfiles import awatch

        return awatch(
            path.parent,
            watch_filter=_SameName(path.name),
            recursive=False,
            debounce=self._debounce_ms,
            step=self._step_ms,
            stop_event=stop_event,
            force_polling=False,
        )


class PollingDetector:
    """Periodic stat polling; compares modification times between ticks."""

    name = "poll"

    def __init__(self, *, interval_ms: int = 500, debounce_ms: int = 300, step_ms: int = 50) -> None:
        self._interval_ms = interval_ms
        self._debounce_ms = debounce_ms
        self._step_ms = step_ms

    def changes(self, path: Path, stop_event: asyncio.Event) -> AsyncGenerator[ChangeBatch]:
        from watchfiles import awatch

        return awatch(
            path.parent,
            watch_filter=_SameName(path.name),
            recursive=False,
            debounce=self._debounce_ms,
            step=self._step_ms,
            stop_event=stop_event,
            force_polling=True,
            poll_delay_ms=self._interval_ms,
        )


def select_detectors(config: GlanceConfig) -> tuple[ChangeDetector, ...]:
    """Return detectors in the order they should be tried.

    Polling is always the last resort.  ``auto`` skips native events under
    WSL, where they are not delivered for Windows-mounted files.

    """
    polling = PollingDetector(
        interval_ms=config.poll_interval_ms,
        debounce_ms=config.debounce_ms,
    )
    if config.watch_mode == "poll":
        return (polling,)
    if config.watch_mode == "auto" and running_under_wsl():
        return (polling,)
    return (NotifyDetector(debounce_ms=config.debounce_ms), polling)


def _digest(source: str) -> str:
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


class SourceWatcher:
    """Keeps the render cache in step with the source file.

    Args:
        target: What to watch.  A detached target makes the watcher a no-op.
        cache: Render cache receiving new artifacts.
        detectors: Change detectors to try in order; each failure falls
            through to the next.
        render: Markdown renderer.
        collector: Optional event collector.

    """

    def __init__(
        self,
        target: WatchTarget,
        cache: RenderCache,
        *,
        detectors: Sequence[ChangeDetector],
        render: Callable[[str], str] = render_markdown,
        collector: LiveCollector | None = None,
    ) -> None:
        self._target = target
        self._cache = cache
        self._detectors = tuple(detectors)
        self._render = render
        self._collector = collector
        self._last_digest: str | None = None
        self._active: str | None = None
        self._failure: WatchError | None = None
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        """Whether the watcher task is alive."""
        return self._task is not None and not self._task.done()

    @property
    def active_detector(self) -> str | None:
        """Name of the detector currently observing the file."""
        return self._active

    @property
    def failure(self) -> WatchError | None:
        """Why watching stopped, once every detector has failed."""
        return self._failure

    def prime(self, source: str) -> None:
        """Remember the text behind the initial artifact.

        A change event whose content matches it is skipped instead of
        re-rendered.
        """
        self._last_digest = _digest(source)

    def start(self) -> None:
        """Spawn the watcher task on the running loop."""
        if self.is_running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self.run(), name="glance-watcher")

    async def stop(self) -> None:
        """Stop the watcher and release the OS watch handle."""
        self._stop_event.set()
        task, self._task = self._task, None
        if task is None:
            return
        if not task.done():
            task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def run(self) -> None:
        """Watch until stopped, degrading through the detector chain.

        Only errors raised by a detector itself move the watcher on to the
        next one.  Read and render failures are handled inside ``refresh``.
        """
        path = self._target.path
        if path is None:
            return

        for index, detector in enumerate(self._detectors):
            self._active = detector.name
            try:
                await self._follow(detector, path)
            except (OSError, RuntimeError) as exc:
                fallback = self._detectors[index + 1].name if index + 1 < len(self._detectors) else None
                self._report_degraded(detector.name, fallback, exc)
                continue
            else:
                return
            finally:
                self._active = None

        self._failure = WatchError(
            f"No change detector could watch {path.name}; the preview will stay static"
        )
        print(f"  {self._failure}", file=sys.stderr)

    async def _follow(self, detector: ChangeDetector, path: Path) -> None:
        """Refresh once per batch until *detector* ends.

        Raises:
            OSError | RuntimeError: Only when the detector fails.

        """
        async with contextlib.aclosing(detector.changes(path, self._stop_event)) as batches:
            while True:
                try:
                    await anext(batches)
                except StopAsyncIteration:
                    return
                await self.refresh()

    async def refresh(self) -> bool:
        """Re-read and re-render the source once.

        Returns:
            True if a new artifact was committed.

        """
        path = self._target.path
        if path is None:
            return False

        t0 = time.perf_counter()
        try:
            source = await asyncio.to_thread(read_source, path)
        except (OSError, UnicodeDecodeError) as exc:
            self._report_failure(path, exc)
            return False

        digest = _digest(source)
        if digest == self._last_digest:
            return False

        print("  File changed, updating content...", file=sys.stderr)
        try:
            html = await asyncio.to_thread(self._render, source)
        except Exception as exc:
            self._report_failure(path, exc, stage="Render")
            return False

        committed, notified = self._cache.update(
            Artifact(html=html, source_name=self._target.display_name)
        )
        self._last_digest = digest

        if self._collector is not None:
            self._collector.record_commit(
                committed.source_name,
                committed.version,
                render_ms=(time.perf_counter() - t0) * 1000,
                clients_notified=notified,
            )
        return True

    def _report_failure(self, path: Path, exc: Exception, *, stage: str = "Read") -> None:
        print(f"  {stage} error: {path.name}: {exc}", file=sys.stderr)
        if self._collector is not None:
            self._collector.record_read_failure(str(path), str(exc))

    def _report_degraded(self, detector: str, fallback: str | None, exc: Exception) -> None:
        next_step = f"falling back to {fallback}" if fallback else "no fallback left"
        print(f"  Watch error ({detector}): {exc}; {next_step}", file=sys.stderr)
        if self._collector is not None:
            self._collector.record_degraded(
                str(self._target.path), detector, fallback, str(exc),
            )
