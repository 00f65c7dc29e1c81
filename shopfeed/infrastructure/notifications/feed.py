"""In-process change feed for delivery records, grouped by recipient."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import DefaultDict, Set

logger = logging.getLogger(__name__)

EVENT_INSERT = "insert"
EVENT_UPDATE = "update"


@dataclass(frozen=True)
class FeedEvent:
    """Signal that some of ``recipient_id``'s delivery records changed.

    The event is a hint only: consumers re-read the affected record set
    instead of applying the event content.
    """

    kind: str
    recipient_id: str
    occurred_at: datetime
    notification_id: str | None = None


class FeedSubscription:
    """Live sequence of :class:`FeedEvent` objects for a single user.

    Iterate with ``async for``. Iteration ends once :meth:`close` is called;
    closing is idempotent and safe from any thread.
    """

    def __init__(
        self,
        feed: "NotificationFeed",
        user_id: str,
        loop: asyncio.AbstractEventLoop,
        maxsize: int,
    ) -> None:
        self.user_id = user_id
        self._feed = feed
        self._loop = loop
        self._queue: asyncio.Queue[FeedEvent | None] = asyncio.Queue(maxsize=max(1, maxsize))
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def deliver(self, event: FeedEvent) -> None:
        """Queue ``event`` on the subscriber's event loop."""

        if self._closed:
            return
        self._call_in_loop(self._offer, event)

    def close(self) -> None:
        """Stop the subscription; further events are discarded."""

        if self._closed:
            return
        self._closed = True
        self._feed._discard(self)
        self._call_in_loop(self._wake)

    async def next_event(self, timeout: float | None = None) -> FeedEvent | None:
        """Return the next event, or ``None`` on timeout or after close."""

        if self._closed:
            return None
        try:
            event = await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None
        if event is None or self._closed:
            return None
        return event

    def drain(self) -> int:
        """Discard queued events and return how many were dropped.

        Must be called from the subscriber's event loop.
        """

        dropped = 0
        while not self._closed and not self._queue.empty():
            if self._queue.get_nowait() is None:
                break
            dropped += 1
        return dropped

    def __aiter__(self) -> "FeedSubscription":
        return self

    async def __anext__(self) -> FeedEvent:
        event = await self.next_event()
        if event is None:
            raise StopAsyncIteration
        return event

    def _call_in_loop(self, callback, *args) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            callback(*args)
            return
        try:
            self._loop.call_soon_threadsafe(callback, *args)
        except RuntimeError:
            # The subscriber's loop is gone; nobody is left to consume events.
            self._closed = True
            self._feed._discard(self)

    def _offer(self, event: FeedEvent) -> None:
        if self._closed:
            return
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            # A pending event already forces the consumer to re-fetch.
            logger.debug("Feed queue full for user %s; dropping event", self.user_id)

    def _wake(self) -> None:
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(None)


class NotificationFeed:
    """Route change events to the live subscriptions of each recipient."""

    def __init__(self, queue_size: int = 100) -> None:
        self._queue_size = queue_size
        self._subscriptions: DefaultDict[str, Set[FeedSubscription]] = defaultdict(set)
        self._lock = threading.Lock()

    def subscribe(self, user_id: str) -> FeedSubscription:
        """Open a subscription for ``user_id`` bound to the running event loop."""

        loop = asyncio.get_running_loop()
        subscription = FeedSubscription(self, user_id, loop, self._queue_size)
        with self._lock:
            self._subscriptions[user_id].add(subscription)
        logger.debug("Opened feed subscription for user %s", user_id)
        return subscription

    def publish(self, event: FeedEvent) -> int:
        """Deliver ``event`` to every subscription of its recipient.

        Returns the number of subscriptions the event was handed to.
        """

        with self._lock:
            targets = list(self._subscriptions.get(event.recipient_id, ()))
        for subscription in targets:
            subscription.deliver(event)
        return len(targets)

    def subscriber_count(self, user_id: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(user_id, ()))

    def close_all(self) -> None:
        """Tear down every open subscription."""

        with self._lock:
            targets = [sub for subs in self._subscriptions.values() for sub in subs]
        for subscription in targets:
            subscription.close()

    def _discard(self, subscription: FeedSubscription) -> None:
        with self._lock:
            subscriptions = self._subscriptions.get(subscription.user_id)
            if subscriptions is None:
                return
            subscriptions.discard(subscription)
            if not subscriptions:
                self._subscriptions.pop(subscription.user_id, None)


__all__ = [
    "EVENT_INSERT",
    "EVENT_UPDATE",
    "FeedEvent",
    "FeedSubscription",
    "NotificationFeed",
]
