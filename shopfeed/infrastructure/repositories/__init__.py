"""Repository implementations for infrastructure layer."""

from .achievement_threshold_repository import AchievementThresholdRepository
from .notification_repository import NotificationRepository
from .user_repository import UserRepository

__all__ = [
    "AchievementThresholdRepository",
    "NotificationRepository",
    "UserRepository",
]
