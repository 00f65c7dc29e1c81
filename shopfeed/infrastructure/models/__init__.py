"""ORM models used by the application infrastructure."""

from .achievement_threshold import AchievementThresholdModel
from .notification import NotificationModel, NotificationRecipientModel
from .user import UserModel

__all__ = [
    "AchievementThresholdModel",
    "NotificationModel",
    "NotificationRecipientModel",
    "UserModel",
]
