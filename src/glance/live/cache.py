"""Render cache — the one current artifact, shared by every request.

The artifact is a frozen value that is replaced, never mutated.  Readers
load the current reference without taking any lock, so a read always sees
one complete artifact: the one before an update or the one after it.

Writers are serialized by a lock.  The change signal for a commit is
published while that lock is still held, so:

- signals leave in the same order as the commits they announce, and
- any viewer reacting to a signal fetches content at least as new as the
  commit that produced it.

Thread Safety:
    ``read()`` is lock-free (a single attribute load of an immutable
    object).  ``update()`` is serialized by a ``threading.Lock`` and may be
    called from any thread.

"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from glance.live.notifier import ChangeNotifier


@dataclass(frozen=True, slots=True)
class Artifact:
    """A rendered document.

    Attributes:
        html: Rendered HTML body (no page template).
        source_name: Display name of the source (file name, ``Clipboard``...).
        version: Commit number, stamped by the cache.  The first artifact a
            cache holds is version 1.
        committed_at: Wall-clock time of the commit (seconds since epoch).

    """

    html: str
    source_name: str
    version: int = 0
    committed_at: float = field(default=0.0, compare=False)


class RenderCache:
    """Holds the current artifact behind a single-writer discipline.

    Args:
        initial: The artifact rendered at startup.  Serving only starts once
            it exists, so a read never finds the cache empty.
        notifier: Receives one ``publish()`` per successful update.

    """

    __slots__ = ("_artifact", "_notifier", "_write_lock")

    def __init__(self, initial: Artifact, notifier: ChangeNotifier) -> None:
        self._notifier = notifier
        self._write_lock = threading.Lock()
        self._artifact = replace(initial, version=1, committed_at=time.time())

    @property
    def notifier(self) -> ChangeNotifier:
        """The notifier told about every commit."""
        return self._notifier

    def read(self) -> Artifact:
        """Return the current artifact.  Never blocks, never fails."""
        return self._artifact

    def update(self, artifact: Artifact) -> tuple[Artifact, int]:
        """Replace the current artifact and announce it.

        The new artifact gets the next version number regardless of the
        version it carries.  Whatever was stored before is discarded.

        Returns:
            The committed artifact and the number of viewers signalled.

        """
        with self._write_lock:
            committed = replace(
                artifact,
                version=self._artifact.version + 1,
                committed_at=time.time(),
            )
            self._artifact = committed
            notified = self._notifier.publish()
        return committed, notified
