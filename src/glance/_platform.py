"""Platform checks shared by the watcher and the browser launcher."""

from pathlib import Path

_WSL_INTEROP = Path("/proc/sys/fs/binfmt_misc/WSLInterop")


def running_under_wsl() -> bool:
    """Return True inside a WSL 2 instance.

    Native change events are unreliable on Windows-mounted paths there, and
    a browser has to be launched on the Windows side.
    """
    return _WSL_INTEROP.exists()
