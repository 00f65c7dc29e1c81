"""Use cases for reading notification feeds."""

from __future__ import annotations

from sqlalchemy.orm import Session

from shopfeed.config import get_settings
from shopfeed.domain.entities import NotificationWithStatus, SentNotificationSummary
from shopfeed.domain.errors import NotFound
from shopfeed.infrastructure.repositories import NotificationRepository

from .validators import normalize_id


def _effective_limit(limit: int | None) -> int:
    ceiling = get_settings().notification_list_limit
    if limit is None or limit <= 0:
        return ceiling
    return min(limit, ceiling)


def list_my_notifications(
    session: Session,
    *,
    user_id: str,
    limit: int | None = None,
    unread_only: bool = False,
) -> list[NotificationWithStatus]:
    """Return the newest notifications delivered to ``user_id``."""

    return NotificationRepository(session).list_for_recipient(
        user_id, limit=_effective_limit(limit), unread_only=unread_only
    )


def get_my_notification(
    session: Session, *, user_id: str, notification_id: str
) -> NotificationWithStatus:
    """Return one notification delivered to ``user_id`` or raise ``NotFound``."""

    target_id = normalize_id(notification_id, field="notification id")
    item = NotificationRepository(session).get_for_recipient(user_id, target_id)
    if item is None:
        raise NotFound("Notification not found")
    return item


def list_sent_notifications(
    session: Session, *, sender_id: str, limit: int | None = None
) -> list[SentNotificationSummary]:
    """Return notifications sent by ``sender_id`` with delivery statistics."""

    return NotificationRepository(session).list_sent_by(
        sender_id, limit=_effective_limit(limit)
    )


__all__ = ["get_my_notification", "list_my_notifications", "list_sent_notifications"]
