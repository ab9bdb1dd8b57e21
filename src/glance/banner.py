"""Startup banner — mode-aware status output.

Prints the Glance banner with timing, the source being previewed, and the
address to open.  Detects ``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from glance._types import GlanceMode


# ---------------------------------------------------------------------------
# ANSI helpers, honouring NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""


_MODE_STYLES: dict[str, tuple[str, str]] = {
    "live": (_GREEN, "live"),
    "static": (_YELLOW, "static"),
}


def _mode_badge(mode: str) -> str:
    """Return a styled [mode] badge."""
    color, label = _MODE_STYLES.get(mode, (_DIM, mode))
    return f"{color}[{label}]{_RESET}"


def _clickable_url(url: str) -> str:
    """Wrap *url* in an OSC 8 hyperlink escape if the terminal supports it."""
    if not _COLOR:
        return url
    return f"\033]8;;{url}\033\\{_BOLD}{_CYAN}{url}{_RESET}\033]8;;\033\\"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def print_banner(
    source_name: str,
    mode: GlanceMode,
    *,
    url: str,
    watching: str | None = None,
    render_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> None:
    """Print the Glance startup banner to stderr.

    Args:
        source_name: Display name of the previewed document.
        mode: ``"live"`` or ``"static"``.
        url: Where the preview can be opened (server URL or file URI).
        watching: Change-detection mode, or ``None`` when the source is
            not watched.
        render_ms: Time spent on the initial render in milliseconds.
        warnings: Optional list of warning messages to display.

    """
    from glance import __version__

    header = f"  {_BOLD}Glance{_RESET} {_DIM}v{__version__}{_RESET}  {_mode_badge(mode)}"

    lines: list[str] = [
        "",
        header,
        f"  {_DIM}{'─' * 43}{_RESET}",
    ]

    timing = f" {_DIM}in {render_ms:.0f}ms{_RESET}" if render_ms > 0 else ""
    lines.append(f"  {_DIM}├─{_RESET} {source_name} rendered{timing}")

    if mode == "live":
        if watching is None:
            lines.append(f"  {_DIM}├─{_RESET} {_DIM}not watched (snapshot){_RESET}")
        else:
            lines.append(f"  {_DIM}├─{_RESET} watching: {watching}")
        lines.append(
            f"  {_DIM}└─{_RESET} {_GREEN}live{_RESET} reload on {_DIM}/events{_RESET}"
        )
        lines.append("")
        lines.append(f"  Server running at {_clickable_url(url)}")
    else:
        lines.append(f"  {_DIM}└─{_RESET} written to {_DIM}{url}{_RESET}")

    if warnings:
        lines.append("")
        lines.extend(f"  {_YELLOW}!{_RESET} {w}" for w in warnings)

    lines.append("")

    print("\n".join(lines), file=sys.stderr)
