"""Live stream — one viewer's server-sent event feed.

Turns a notifier subscription into an endless chirp ``EventStream``:

- every change signal becomes one ``reload`` event (``data: reload``,
  no event name, so it lands in the page's ``onmessage`` handler), and
- after ``heartbeat_interval`` seconds without an event, chirp writes a
  ``: heartbeat`` comment line.  Comments never reach page scripts, so a
  heartbeat cannot trigger a reload.

The subscription is registered as soon as the stream is opened.  It is
released exactly once: when the feed is closed (chirp calls ``aclose()`` on
disconnect, whether or not iteration ever started), when a pending read is
cancelled, or when the notifier shuts down.
"""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chirp import EventStream, SSEEvent

    from glance.live.notifier import ChangeNotifier, Subscription
    from glance.observability.collector import LiveCollector

RELOAD = "reload"


class ViewerFeed:
    """Async iterator of ``reload`` events for one subscription.

    Unlike an async generator, closing a feed that was never iterated still
    releases its subscription.

    Args:
        notifier: Notifier the subscription belongs to.
        subscription: The viewer's mailbox.
        collector: Optional event collector for the disconnect record.

    """

    __slots__ = ("_collector", "_notifier", "_released", "_subscription")

    def __init__(
        self,
        notifier: ChangeNotifier,
        subscription: Subscription,
        collector: LiveCollector | None = None,
    ) -> None:
        self._notifier = notifier
        self._subscription = subscription
        self._collector = collector
        self._released = False

    @property
    def released(self) -> bool:
        """Whether the subscription has been given back to the notifier."""
        return self._released

    def __aiter__(self) -> ViewerFeed:
        return self

    async def __anext__(self) -> SSEEvent:
        from chirp import SSEEvent

        if self._released:
            raise StopAsyncIteration
        try:
            signal = await self._subscription.next()
        except asyncio.CancelledError:
            self._release()
            raise
        if signal is None:
            self._release()
            raise StopAsyncIteration
        return SSEEvent(data=RELOAD)

    async def aclose(self) -> None:
        """End the feed and release the subscription."""
        self._release()

    def _release(self) -> None:
        if self._released:
            return
        self._released = True
        self._notifier.unsubscribe(self._subscription)
        remaining = self._notifier.subscriber_count
        if self._collector is not None:
            self._collector.record_viewer("disconnected", remaining)
        print(f"  Viewer disconnected ({remaining} connected)", file=sys.stderr)


class LiveStream:
    """Opens event streams for viewers of the previewed document.

    Args:
        notifier: Source of change signals.
        heartbeat_interval: Idle seconds before a keep-alive comment is sent.
        collector: Optional event collector for connect/disconnect records.

    """

    __slots__ = ("_collector", "_heartbeat_interval", "_notifier")

    def __init__(
        self,
        notifier: ChangeNotifier,
        *,
        heartbeat_interval: float = 15.0,
        collector: LiveCollector | None = None,
    ) -> None:
        self._notifier = notifier
        self._heartbeat_interval = heartbeat_interval
        self._collector = collector

    def open(self) -> EventStream:
        """Subscribe a new viewer and return its event stream.

        Must be called on the event loop that will drive the stream.

        """
        from chirp import EventStream

        subscription = self._notifier.subscribe()
        if self._collector is not None:
            self._collector.record_viewer("connected", self._notifier.subscriber_count)
        return EventStream(
            self.relay(subscription),
            heartbeat_interval=self._heartbeat_interval,
        )

    def relay(self, subscription: Subscription) -> ViewerFeed:
        """Return a feed yielding one ``reload`` event per signal."""
        return ViewerFeed(self._notifier, subscription, self._collector)
