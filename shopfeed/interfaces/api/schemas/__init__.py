from .achievement import (
    AchievementEvaluateRequest,
    AchievementEvaluateResponse,
    AchievementThresholdsUpdate,
    AchievementTierSchema,
)
from .notification import (
    InboxSnapshotRead,
    MarkReadResult,
    NotificationMarkReadRequest,
    NotificationRead,
    NotificationSendRequest,
    NotificationSendResponse,
    SentNotificationRead,
    UnreadCountRead,
)

__all__ = [
    "AchievementEvaluateRequest",
    "AchievementEvaluateResponse",
    "AchievementThresholdsUpdate",
    "AchievementTierSchema",
    "InboxSnapshotRead",
    "MarkReadResult",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "NotificationSendRequest",
    "NotificationSendResponse",
    "SentNotificationRead",
    "UnreadCountRead",
]
