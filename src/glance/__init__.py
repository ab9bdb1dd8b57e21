"""Glance — a live Markdown preview server for Python 3.14t.

Renders one Markdown document to HTML, serves it over HTTP, and keeps every
open browser tab in sync with the file on disk. Save the file, the page
reloads itself.

Quick start::

    import glance

    glance.preview("README.md")

Two modes::

    glance.preview("README.md")          # Live server with reload-on-save
    glance.render_static("README.md")    # One-shot temp file, no server

Built on the Bengal ecosystem:

    pounce      ASGI server       (serves the app)
    chirp       Web framework     (routes and SSE)
    kida        Template engine   (wraps the document)
    patitas     Markdown parser   (renders the document)

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0.dev0"
__all__ = [
    "GlanceConfig",
    "__version__",
    "preview",
    "render_static",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import glance`` fast; the web stack is only imported when a
    preview actually starts.
    """
    if name == "GlanceConfig":
        from glance.config import GlanceConfig

        return GlanceConfig

    if name == "preview":
        from glance.app import preview

        return preview

    if name == "render_static":
        from glance.app import render_static

        return render_static

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
