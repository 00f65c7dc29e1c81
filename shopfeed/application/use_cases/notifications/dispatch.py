"""Use case that creates a notification and fans it out to its recipients."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any
from uuid import uuid4

from sqlalchemy.orm import Session

from shopfeed.config import get_settings
from shopfeed.domain.entities import Notification, NotificationType
from shopfeed.domain.errors import InvalidArgument
from shopfeed.infrastructure.notifications import (
    NotificationPublisher,
    notification_publisher,
)
from shopfeed.infrastructure.repositories import NotificationRepository, UserRepository
from shopfeed.utils import now_in_app_timezone

from .validators import coerce_type, normalize_id, normalize_recipient_ids, require_text

logger = logging.getLogger(__name__)


def dispatch_notification(
    session: Session,
    *,
    sender_id: str | None,
    title: str,
    message: str,
    type: NotificationType | str,
    recipient_ids: Iterable[str],
    metadata: Mapping[str, Any] | None = None,
    publisher: NotificationPublisher | None = None,
) -> Notification:
    """Persist one notification plus one delivery record per distinct recipient.

    Validation happens before any write. The notification and all of its
    delivery records are committed together; on failure nothing is stored.
    Feed events are only published after the commit succeeded.
    """

    notification_type = coerce_type(type)
    clean_title = require_text(title, field="title")
    clean_message = require_text(message, field="message")
    recipients = normalize_recipient_ids(recipient_ids)
    sender = normalize_id(sender_id, field="sender id") if sender_id is not None else None

    known = UserRepository(session).get_map_by_ids(
        recipients + ([sender] if sender else [])
    )
    unknown = [recipient for recipient in recipients if recipient not in known]
    if unknown:
        raise InvalidArgument(f"Unknown recipients: {', '.join(unknown)}")
    if sender is not None and sender not in known:
        raise InvalidArgument(f"Unknown sender: {sender}")

    settings = get_settings()
    created_at = now_in_app_timezone()
    expires_at = (
        created_at + timedelta(days=settings.notification_retention_days)
        if settings.notification_retention_days
        else None
    )
    notification = Notification(
        id=str(uuid4()),
        created_at=created_at,
        title=clean_title,
        message=clean_message,
        type=notification_type,
        sender_id=sender,
        metadata=dict(metadata or {}),
        expires_at=expires_at,
    )

    records = NotificationRepository(session).create_with_recipients(
        notification, recipients
    )
    logger.info(
        "Dispatched %s notification %s to %d recipients",
        notification_type.value,
        notification.id,
        len(records),
    )

    (publisher or notification_publisher).delivered(records)
    return notification


__all__ = ["dispatch_notification"]
