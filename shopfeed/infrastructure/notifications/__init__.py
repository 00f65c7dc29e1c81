"""Realtime notification helpers for the infrastructure layer."""

from .feed import (
    EVENT_INSERT,
    EVENT_UPDATE,
    FeedEvent,
    FeedSubscription,
    NotificationFeed,
)
from .publisher import NotificationPublisher, notification_feed, notification_publisher

__all__ = [
    "EVENT_INSERT",
    "EVENT_UPDATE",
    "FeedEvent",
    "FeedSubscription",
    "NotificationFeed",
    "NotificationPublisher",
    "notification_feed",
    "notification_publisher",
]
