"""Static preview — render once to a temporary HTML file.

Static mode has no server and no watcher: the document is rendered with
the same page template as a live preview (minus the reload script),
written to ``markdown_preview_*.html`` in the system temp directory, and
removed again when the user is done.
"""

from __future__ import annotations

import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from glance._errors import ExportError
from glance.web.page import render_page

if TYPE_CHECKING:
    from glance.live.cache import Artifact
    from glance.web.page import Assets

PREVIEW_PREFIX = "markdown_preview_"
PREVIEW_SUFFIX = ".html"


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Record of a written preview file.

    Attributes:
        output_path: Absolute path to the HTML file.
        source_name: Display name of the rendered document.
        size_bytes: Size of the written file in bytes.
        duration_ms: Time taken to render and write the file.

    """

    output_path: Path
    source_name: str
    size_bytes: int
    duration_ms: float

    @property
    def uri(self) -> str:
        """``file://`` URI for opening the preview in a browser."""
        return self.output_path.as_uri()


def write_preview(
    artifact: Artifact,
    assets: Assets,
    *,
    directory: Path | None = None,
) -> ExportResult:
    """Write *artifact* as a standalone page to a new temporary file.

    Args:
        artifact: The rendered document.
        assets: Stylesheet and favicon.
        directory: Where to create the file (system temp dir by default).

    Raises:
        ExportError: If the file cannot be created or written.

    """
    t0 = time.perf_counter()
    html = render_page(artifact, assets, live=False)
    data = html.encode("utf-8")
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            prefix=PREVIEW_PREFIX,
            suffix=PREVIEW_SUFFIX,
            dir=directory,
            delete=False,
        ) as handle:
            handle.write(data)
    except OSError as exc:
        msg = f"Failed to write preview file: {exc}"
        raise ExportError(msg) from exc

    return ExportResult(
        output_path=Path(handle.name).resolve(),
        source_name=artifact.source_name,
        size_bytes=len(data),
        duration_ms=(time.perf_counter() - t0) * 1000,
    )


def remove_preview(result: ExportResult) -> None:
    """Delete a preview file written by :func:`write_preview`.  Missing is fine."""
    result.output_path.unlink(missing_ok=True)
