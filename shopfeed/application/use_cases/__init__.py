"""Aggregate application use cases."""

from .achievements import evaluate_achievement, notify_achievement
from .notifications import (
    dispatch_notification,
    mark_all_read,
    mark_read,
    send_notification,
)

__all__ = [
    "dispatch_notification",
    "evaluate_achievement",
    "mark_all_read",
    "mark_read",
    "notify_achievement",
    "send_notification",
]
