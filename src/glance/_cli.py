"""Glance CLI — glance FILE / glance --clipboard / glance -s.

Entry point for the ``glance`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys

from glance._errors import GlanceError


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the glance CLI."""
    parser = argparse.ArgumentParser(
        prog="glance",
        description="Live Markdown preview: serve a document and reload the browser on save.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument("file", nargs="?", default=None, help="Markdown file to preview")
    # Server options default to None so glance.toml / glance.yaml values apply.
    parser.add_argument("-H", "--host", default=None, help="Bind address (default: 127.0.0.1)")
    parser.add_argument("-P", "--port", type=int, default=None, help="Bind port (default: 3030)")
    parser.add_argument(
        "-s", "--static-mode",
        action="store_true",
        help="Render once to a temporary HTML file instead of serving",
    )
    parser.add_argument(
        "-C", "--clipboard",
        action="store_true",
        help="Preview the Markdown currently on the clipboard",
    )
    parser.add_argument(
        "--watch",
        choices=("auto", "native", "poll"),
        default=None,
        help="Change detection: OS events, stat polling, or auto (default: auto)",
    )
    parser.add_argument(
        "--poll-interval",
        type=int,
        default=None,
        metavar="MS",
        help="Polling period in milliseconds (default: 500)",
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Do not open the preview in a browser",
    )
    return parser


def _get_version() -> str:
    """Get the package version."""
    from glance import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    from glance.app import preview, render_static

    options: dict[str, object] = {
        "host": args.host,
        "port": args.port,
        "clipboard": args.clipboard or None,
        "watch_mode": args.watch,
        "poll_interval_ms": args.poll_interval,
        "open_browser": False if args.no_browser else None,
    }

    try:
        if args.static_mode:
            render_static(args.file, **options)
        else:
            preview(args.file, **options)
    except KeyboardInterrupt:
        sys.exit(0)
    except (GlanceError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
