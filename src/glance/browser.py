"""Browser launcher and host display.

Opening a browser is best effort: a failure prints a hint and the preview
keeps running, since the URL is also on the banner.
"""

from __future__ import annotations

import socket
import subprocess
import sys
import webbrowser

from glance._platform import running_under_wsl

_ANY_ADDRESS = "0.0.0.0"


def open_in_browser(target: str) -> bool:
    """Open *target* (a URL or a ``file://`` URI) in the user's browser.

    Under WSL the Windows host's browser is started through
    ``powershell.exe``; everywhere else :mod:`webbrowser` picks the
    platform default.

    Returns:
        True if a browser was launched.

    """
    if running_under_wsl():
        try:
            subprocess.Popen(
                ["powershell.exe", "-c", "start", target],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as exc:
            print(f"  Could not open browser from WSL: {exc}", file=sys.stderr)
            return False
        return True

    try:
        opened = webbrowser.open(target)
    except webbrowser.Error as exc:
        print(f"  Could not open browser: {exc}", file=sys.stderr)
        return False
    if not opened:
        print(f"  No browser available; open {target} manually", file=sys.stderr)
    return opened


def display_host(host: str) -> str:
    """Return the address viewers should use to reach *host*.

    A server bound to every interface is shown under the machine's LAN
    address.  Falls back to *host* when no route is available.
    """
    if host != _ANY_ADDRESS:
        return host
    return _local_ip() or host


def _local_ip() -> str | None:
    # Connecting a UDP socket sends nothing; it only selects the outbound
    # interface, whose address is the one other machines can reach.
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("10.255.255.255", 1))
            return sock.getsockname()[0]
    except OSError:
        return None
