"""Domain entities exposed by the application."""

from .achievement import AchievementTier
from .notification import (
    DeliveryRecord,
    Notification,
    NotificationType,
    NotificationWithStatus,
    SentNotificationSummary,
)
from .user import ROLE_ADMIN, ROLE_LEADER, ROLE_MEMBER, ROLES, User

__all__ = [
    "AchievementTier",
    "DeliveryRecord",
    "Notification",
    "NotificationType",
    "NotificationWithStatus",
    "SentNotificationSummary",
    "User",
    "ROLE_ADMIN",
    "ROLE_LEADER",
    "ROLE_MEMBER",
    "ROLES",
]
