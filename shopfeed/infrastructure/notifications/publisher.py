"""Helpers that turn store mutations into feed events."""

from __future__ import annotations

import logging
from typing import Iterable

from shopfeed.config import get_settings
from shopfeed.domain.entities import DeliveryRecord
from shopfeed.utils import now_in_app_timezone

from .feed import EVENT_INSERT, EVENT_UPDATE, FeedEvent, NotificationFeed

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Publish change events for committed delivery-record mutations."""

    def __init__(self, feed: NotificationFeed) -> None:
        self.feed = feed

    def delivered(self, records: Iterable[DeliveryRecord]) -> None:
        """Announce newly inserted delivery records to their recipients."""

        for record in records:
            self.feed.publish(
                FeedEvent(
                    kind=EVENT_INSERT,
                    recipient_id=record.recipient_id,
                    notification_id=record.notification_id,
                    occurred_at=record.created_at,
                )
            )

    def read_state_changed(
        self, recipient_id: str, notification_id: str | None = None
    ) -> None:
        """Announce that some of ``recipient_id``'s records were marked read."""

        delivered = self.feed.publish(
            FeedEvent(
                kind=EVENT_UPDATE,
                recipient_id=recipient_id,
                notification_id=notification_id,
                occurred_at=now_in_app_timezone(),
            )
        )
        logger.debug(
            "Read-state change for user %s sent to %d subscriptions",
            recipient_id,
            delivered,
        )


notification_feed = NotificationFeed(queue_size=get_settings().feed_queue_size)
notification_publisher = NotificationPublisher(notification_feed)


__all__ = [
    "NotificationPublisher",
    "notification_feed",
    "notification_publisher",
]
