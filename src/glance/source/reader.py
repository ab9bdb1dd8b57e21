"""Source reader — where the Markdown comes from.

Three inputs are supported:

- a file on disk (watched for changes in live mode),
- the system clipboard (a one-time snapshot, never watched), and
- stdin (static mode only, never watched).

``load_source`` turns a ``GlanceConfig`` into a ``WatchTarget`` plus the
initial text.  Any failure here is fatal: the server must not start
without a first artifact.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from glance._errors import ConfigError, SourceError

if TYPE_CHECKING:
    from glance.config import GlanceConfig

CLIPBOARD_NAME = "Clipboard"
STDIN_NAME = "New file"


@dataclass(frozen=True, slots=True)
class WatchTarget:
    """What the watcher observes.

    Attributes:
        path: Absolute path of the source file, or ``None`` for a detached
            source (clipboard snapshot, stdin) that is never re-read.
        display_name: Name shown as the document title.

    """

    path: Path | None
    display_name: str

    @classmethod
    def for_file(cls, path: Path) -> WatchTarget:
        """Target a file on disk, titled by its file name."""
        path = path if path.is_absolute() else path.resolve()
        return cls(path=path, display_name=path.name)

    @classmethod
    def detached(cls, display_name: str) -> WatchTarget:
        """Target a source that cannot change after startup."""
        return cls(path=None, display_name=display_name)

    @property
    def is_watchable(self) -> bool:
        """Whether there is a file to watch."""
        return self.path is not None


def read_source(path: Path) -> str:
    """Read a Markdown file fully as UTF-8.

    Raises:
        OSError: If the file is missing, locked, or unreadable.
        UnicodeDecodeError: If the file is not valid UTF-8.

    """
    return path.read_text(encoding="utf-8")


def read_clipboard() -> str:
    """Return the current clipboard text.

    Raises:
        SourceError: If no clipboard mechanism is available.

    """
    import pyperclip

    try:
        return pyperclip.paste()
    except pyperclip.PyperclipException as exc:
        msg = f"Error reading from clipboard: {exc}"
        raise SourceError(msg) from exc


def read_stdin() -> str:
    """Read all of stdin."""
    return sys.stdin.read()


def load_source(config: GlanceConfig) -> tuple[WatchTarget, str]:
    """Resolve the configured input into a target and its initial text.

    Raises:
        ConfigError: If live mode has neither a file nor ``--clipboard``.
        SourceError: If the initial content cannot be read.

    """
    if config.clipboard:
        return WatchTarget.detached(CLIPBOARD_NAME), read_clipboard()

    if config.source is None:
        if not config.static:
            msg = "No input file specified in server mode."
            raise ConfigError(msg)
        return WatchTarget.detached(STDIN_NAME), read_stdin()

    target = WatchTarget.for_file(config.source)
    try:
        text = read_source(config.source)
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Error opening file {config.source}: {exc}"
        raise SourceError(msg) from exc
    return target, text
