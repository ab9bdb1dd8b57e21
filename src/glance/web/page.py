"""Page shell — wraps a rendered artifact into a complete HTML document.

The bundled ``page.html`` template adds the document title, inline
stylesheet, favicon, footnote and MathJax scripts and, for live previews,
the reload script that listens on the event stream.

Thread Safety:
    ``PageRenderer`` holds a kida ``Environment`` and immutable ``Assets``.
    Rendering is a pure function of its inputs and safe from any thread.

"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from functools import cache
from importlib.resources import files
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kida import Environment

    from glance.live.cache import Artifact

PAGE_TEMPLATE = "page.html"
EVENTS_ENDPOINT = "/events"


@dataclass(frozen=True, slots=True)
class Assets:
    """Inert blobs handed to the page template.

    Attributes:
        style: Stylesheet text, inlined into a ``<style>`` element.
        favicon: Base64-encoded SVG icon, embedded as a data URI.

    """

    style: str
    favicon: str

    @classmethod
    def bundled(cls) -> Assets:
        """Load the stylesheet and favicon shipped with the package."""
        root = files("glance.web") / "assets"
        style = (root / "style.css").read_text(encoding="utf-8")
        favicon = base64.b64encode((root / "favicon.svg").read_bytes()).decode("ascii")
        return cls(style=style, favicon=favicon)


@cache
def _environment() -> Environment:
    from kida import Environment, PackageLoader

    return Environment(loader=PackageLoader("glance.web", "templates"))


def render_page(artifact: Artifact, assets: Assets, *, live: bool) -> str:
    """Render *artifact* as a full HTML document.

    Args:
        artifact: The document body and its display name.
        assets: Stylesheet and favicon.
        live: Include the reload script (server mode only).

    """
    return _environment().render(
        PAGE_TEMPLATE,
        title=artifact.source_name,
        body=artifact.html,
        style=assets.style,
        favicon=assets.favicon,
        live=live,
        events_url=EVENTS_ENDPOINT,
    )
