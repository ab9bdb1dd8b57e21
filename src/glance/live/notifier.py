"""Change notifier — fans reload signals out to connected viewers.

One producer (the render cache, right after a commit) tells every
registered subscription that a new artifact is available.  Each
subscription owns a small bounded mailbox; a viewer that is not
listening when a signal fires gets nothing retroactively.

Delivery never blocks the producer:

- A full mailbox drops its **oldest** pending signal.  Signals carry no
  payload, so a dropped signal only means fewer redundant reloads; the
  next fetch always returns the latest artifact.
- A subscription that can no longer receive (closed, or its event loop
  is gone) is reaped on the next publish.

Thread Safety:
    The subscriber set is protected by a ``threading.Lock`` and publish
    iterates a snapshot.  Mailboxes are ``asyncio.Queue`` objects bound to
    the loop that created the subscription; publishing from another thread
    hands the delivery to that loop via ``call_soon_threadsafe``.

"""

from __future__ import annotations

import asyncio
import itertools
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

DEFAULT_MAILBOX_CAPACITY = 16


@dataclass(frozen=True, slots=True)
class ChangeSignal:
    """A new artifact is available.  Carries nothing else."""


@dataclass(frozen=True, slots=True)
class _Closed:
    """Mailbox marker: the subscription has ended."""


SIGNAL = ChangeSignal()
_CLOSED = _Closed()

type _Mail = ChangeSignal | _Closed


class Subscription:
    """One viewer's registration for change signals.

    Created by :meth:`ChangeNotifier.subscribe` and consumed by exactly one
    event stream.  Await :meth:`next` or iterate asynchronously; iteration
    ends once the subscription is closed.

    Args:
        subscriber_id: Unique id within the notifier.
        loop: Event loop that owns the mailbox.
        capacity: Mailbox size.

    """

    __slots__ = ("_closed", "_dropped", "_loop", "_mailbox", "subscriber_id")

    def __init__(
        self,
        subscriber_id: int,
        loop: asyncio.AbstractEventLoop,
        capacity: int = DEFAULT_MAILBOX_CAPACITY,
    ) -> None:
        self.subscriber_id = subscriber_id
        self._loop = loop
        self._mailbox: asyncio.Queue[_Mail] = asyncio.Queue(maxsize=capacity)
        self._closed = False
        self._dropped = 0

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Subscription #{self.subscriber_id} {state} pending={self.pending}>"

    @property
    def closed(self) -> bool:
        """Whether the subscription stopped accepting signals."""
        return self._closed

    @property
    def pending(self) -> int:
        """Number of items waiting in the mailbox."""
        return self._mailbox.qsize()

    @property
    def dropped(self) -> int:
        """Number of signals discarded because the mailbox was full."""
        return self._dropped

    def deliver(self, signal: ChangeSignal = SIGNAL) -> bool:
        """Queue *signal* without blocking.

        Returns:
            False if the subscription can no longer receive signals and
            should be unregistered.

        """
        if self._closed:
            return False
        return self._post(signal)

    def close(self) -> None:
        """Stop accepting signals and wake a pending :meth:`next`."""
        if self._closed:
            return
        self._closed = True
        self._post(_CLOSED)

    async def next(self) -> ChangeSignal | None:
        """Wait for the next signal; ``None`` once the subscription is closed."""
        if self._closed and self._mailbox.empty():
            return None
        mail = await self._mailbox.get()
        if isinstance(mail, _Closed):
            return None
        return mail

    async def __aiter__(self) -> AsyncIterator[ChangeSignal]:
        while (signal := await self.next()) is not None:
            yield signal

    def _post(self, mail: _Mail) -> bool:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._put(mail)
            return True

        try:
            self._loop.call_soon_threadsafe(self._put, mail)
        except RuntimeError:
            # Owning loop is closed; nobody will ever read this mailbox.
            self._closed = True
            return False
        return True

    def _put(self, mail: _Mail) -> None:
        if self._closed and not isinstance(mail, _Closed):
            return
        if self._mailbox.full():
            self._mailbox.get_nowait()
            self._dropped += 1
        self._mailbox.put_nowait(mail)


class ChangeNotifier:
    """Broadcasts change signals to every live subscription.

    Supports exactly one topic (the previewed document) and any number of
    short-lived subscribers.

    Args:
        capacity: Mailbox size for each new subscription.

    """

    def __init__(self, capacity: int = DEFAULT_MAILBOX_CAPACITY) -> None:
        self._capacity = capacity
        self._subscribers: set[Subscription] = set()
        self._lock = threading.Lock()
        self._ids = itertools.count(1)

    @property
    def subscriber_count(self) -> int:
        """Number of registered subscriptions."""
        with self._lock:
            return len(self._subscribers)

    def subscribe(self) -> Subscription:
        """Register a new subscription on the running event loop.

        Raises:
            RuntimeError: If called outside a running event loop.

        """
        loop = asyncio.get_running_loop()
        subscription = Subscription(next(self._ids), loop, self._capacity)
        with self._lock:
            self._subscribers.add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Close and remove a subscription.  Safe to call twice."""
        subscription.close()
        with self._lock:
            self._subscribers.discard(subscription)

    def publish(self) -> int:
        """Deliver one change signal to every subscription.

        Never waits on any subscriber.  Subscriptions that can no longer
        receive are removed.

        Returns:
            Number of subscriptions the signal was delivered to.

        """
        with self._lock:
            snapshot = tuple(self._subscribers)

        delivered = 0
        dead: list[Subscription] = []
        for subscription in snapshot:
            if subscription.deliver(SIGNAL):
                delivered += 1
            else:
                dead.append(subscription)

        if dead:
            with self._lock:
                self._subscribers.difference_update(dead)
        return delivered

    def close(self) -> None:
        """Close every subscription so their streams end (process shutdown)."""
        with self._lock:
            snapshot = tuple(self._subscribers)
            self._subscribers.clear()
        for subscription in snapshot:
            subscription.close()
