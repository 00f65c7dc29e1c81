"""Use cases that track which notifications a user has read."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from shopfeed.infrastructure.notifications import (
    NotificationPublisher,
    notification_publisher,
)
from shopfeed.infrastructure.repositories import NotificationRepository
from shopfeed.utils import now_in_app_timezone

from .validators import normalize_id

logger = logging.getLogger(__name__)


def mark_read(
    session: Session,
    *,
    user_id: str,
    notification_id: str,
    publisher: NotificationPublisher | None = None,
) -> bool:
    """Mark ``user_id``'s delivery of ``notification_id`` as read.

    Returns ``True`` when a row changed. Already-read records and
    notifications that were never delivered to ``user_id`` are left untouched.
    """

    target_id = normalize_id(notification_id, field="notification id")
    updated = NotificationRepository(session).mark_read(
        user_id, target_id, read_at=now_in_app_timezone()
    )
    if updated:
        (publisher or notification_publisher).read_state_changed(user_id, target_id)
    return bool(updated)


def mark_many_read(
    session: Session,
    *,
    user_id: str,
    notification_ids: list[str],
    publisher: NotificationPublisher | None = None,
) -> int:
    """Mark each of ``notification_ids`` read; return how many rows changed."""

    changed = 0
    for notification_id in dict.fromkeys(notification_ids):
        if mark_read(
            session,
            user_id=user_id,
            notification_id=notification_id,
            publisher=publisher,
        ):
            changed += 1
    return changed


def mark_all_read(
    session: Session,
    *,
    user_id: str,
    publisher: NotificationPublisher | None = None,
) -> int:
    """Mark every unread delivery record of ``user_id`` as read in one update."""

    updated = NotificationRepository(session).mark_all_read(
        user_id, read_at=now_in_app_timezone()
    )
    if updated:
        logger.info("Marked %d notifications as read for user %s", updated, user_id)
        (publisher or notification_publisher).read_state_changed(user_id)
    return updated


def count_unread(session: Session, *, user_id: str) -> int:
    """Return the number of unread delivery records, recomputed from the store."""

    return NotificationRepository(session).count_unread(user_id)


__all__ = ["count_unread", "mark_all_read", "mark_many_read", "mark_read"]
