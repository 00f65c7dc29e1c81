"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from shopfeed.application.use_cases.notifications import InboxSnapshot, RecipientTarget
from shopfeed.domain.entities import (
    NotificationType,
    NotificationWithStatus,
    SentNotificationSummary,
)


class NotificationSendRequest(BaseModel):
    """Payload used by admins and leaders to send a manual notification."""

    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    target: RecipientTarget = RecipientTarget.SPECIFIC
    recipient_ids: list[str] = Field(default_factory=list)


class NotificationSendResponse(BaseModel):
    id: str
    recipient_count: int


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[str] = Field(..., min_length=1, description="Notification identifiers")


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    created_at: datetime
    title: str
    message: str
    type: NotificationType
    sender_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    expires_at: datetime | None = None
    recipient_id: str
    read_at: datetime | None = None

    @classmethod
    def from_entity(cls, item: NotificationWithStatus) -> "NotificationRead":
        notification = item.notification
        return cls(
            id=notification.id,
            created_at=notification.created_at,
            title=notification.title,
            message=notification.message,
            type=notification.type,
            sender_id=notification.sender_id,
            metadata=notification.metadata,
            expires_at=notification.expires_at,
            recipient_id=item.recipient_id,
            read_at=item.read_at,
        )


class SentNotificationRead(BaseModel):
    """A notification the caller sent, with delivery statistics."""

    id: str
    created_at: datetime
    title: str
    message: str
    type: NotificationType
    recipient_count: int
    read_count: int

    @classmethod
    def from_entity(cls, summary: SentNotificationSummary) -> "SentNotificationRead":
        notification = summary.notification
        return cls(
            id=notification.id,
            created_at=notification.created_at,
            title=notification.title,
            message=notification.message,
            type=notification.type,
            recipient_count=summary.recipient_count,
            read_count=summary.read_count,
        )


class UnreadCountRead(BaseModel):
    unread_count: int


class MarkReadResult(BaseModel):
    updated: int


class InboxSnapshotRead(BaseModel):
    """Full inbox state pushed through the websocket."""

    unread_count: int
    notifications: list[NotificationRead] = Field(default_factory=list)

    @classmethod
    def from_snapshot(cls, snapshot: InboxSnapshot) -> "InboxSnapshotRead":
        return cls(
            unread_count=snapshot.unread_count,
            notifications=[NotificationRead.from_entity(n) for n in snapshot.notifications],
        )


__all__ = [
    "InboxSnapshotRead",
    "MarkReadResult",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "NotificationSendRequest",
    "NotificationSendResponse",
    "SentNotificationRead",
    "UnreadCountRead",
]
