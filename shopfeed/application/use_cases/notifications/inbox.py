"""Consumer side of the live feed: re-fetch the inbox on every change."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field

from anyio import to_thread
from sqlalchemy.orm import Session

from shopfeed.domain.entities import NotificationWithStatus
from shopfeed.domain.errors import TransientStoreFailure
from shopfeed.infrastructure.notifications import FeedSubscription

from .list_notifications import list_my_notifications
from .read_state import count_unread

logger = logging.getLogger(__name__)

FailureHandler = Callable[[TransientStoreFailure], Awaitable[None]]


@dataclass(frozen=True)
class InboxSnapshot:
    """State of a user's inbox as read from the store in one pass."""

    unread_count: int
    notifications: list[NotificationWithStatus] = field(default_factory=list)


class NotificationInbox:
    """Keep a user's view in sync by re-reading it whenever the feed signals.

    Feed events are neither ordered nor guaranteed, so every event (and every
    reconnect) triggers a full re-fetch instead of an incremental merge.
    """

    def __init__(
        self,
        user_id: str,
        session_factory: Callable[[], Session],
        *,
        limit: int | None = None,
    ) -> None:
        self.user_id = user_id
        self._session_factory = session_factory
        self._limit = limit

    def fetch(self) -> InboxSnapshot:
        session = self._session_factory()
        try:
            notifications = list_my_notifications(
                session, user_id=self.user_id, limit=self._limit
            )
            unread = count_unread(session, user_id=self.user_id)
        finally:
            session.close()
        return InboxSnapshot(unread_count=unread, notifications=notifications)

    async def refresh(self) -> InboxSnapshot:
        return await to_thread.run_sync(self.fetch)

    async def follow(
        self,
        subscription: FeedSubscription,
        *,
        on_failure: FailureHandler | None = None,
    ) -> AsyncIterator[InboxSnapshot]:
        """Yield an initial snapshot, then a fresh one after each change.

        When ``on_failure`` is given, a failed re-fetch is reported to it and
        skipped; the next change event triggers another attempt. Without a
        handler the failure propagates.
        """

        snapshot = await self._attempt_refresh(on_failure)
        if snapshot is not None:
            yield snapshot
        async for _event in subscription:
            # One re-fetch covers every event queued so far.
            subscription.drain()
            snapshot = await self._attempt_refresh(on_failure)
            if snapshot is not None:
                yield snapshot

    async def _attempt_refresh(
        self, on_failure: FailureHandler | None
    ) -> InboxSnapshot | None:
        try:
            return await self.refresh()
        except TransientStoreFailure as exc:
            if on_failure is None:
                raise
            logger.warning("Inbox refresh failed for user %s: %s", self.user_id, exc)
            await on_failure(exc)
            return None


__all__ = ["InboxSnapshot", "NotificationInbox"]
