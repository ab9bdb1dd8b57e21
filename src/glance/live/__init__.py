"""Live layer — the in-memory artifact and change fan-out.

Holds the current rendered document, announces every commit to connected
viewers, and turns those announcements into server-sent events.
"""

from glance.live.cache import Artifact, RenderCache
from glance.live.notifier import ChangeNotifier, ChangeSignal, Subscription
from glance.live.stream import RELOAD, LiveStream, ViewerFeed

__all__ = [
    "RELOAD",
    "Artifact",
    "ChangeNotifier",
    "ChangeSignal",
    "LiveStream",
    "RenderCache",
    "Subscription",
    "ViewerFeed",
]
