"""Domain entities describing notifications and their delivery state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    """Origin of a notification."""

    MANUAL = "manual"
    ACHIEVEMENT = "achievement"
    SYSTEM = "system"


@dataclass(frozen=True)
class Notification:
    """Message created once by the dispatcher and never modified afterwards."""

    id: str
    created_at: datetime
    title: str
    message: str
    type: NotificationType
    sender_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    expires_at: datetime | None = None


@dataclass(frozen=True)
class DeliveryRecord:
    """Per-recipient row tracking whether a notification has been read."""

    id: str
    notification_id: str
    recipient_id: str
    created_at: datetime
    read_at: datetime | None = None

    @property
    def is_read(self) -> bool:
        return self.read_at is not None


@dataclass(frozen=True)
class NotificationWithStatus:
    """A notification as seen by one recipient, including its read state."""

    notification: Notification
    recipient_id: str
    read_at: datetime | None = None

    @property
    def id(self) -> str:
        return self.notification.id

    @property
    def is_read(self) -> bool:
        return self.read_at is not None


@dataclass(frozen=True)
class SentNotificationSummary:
    """A notification sent by a user with aggregate delivery statistics."""

    notification: Notification
    recipient_count: int
    read_count: int


__all__ = [
    "NotificationType",
    "Notification",
    "DeliveryRecord",
    "NotificationWithStatus",
    "SentNotificationSummary",
]
