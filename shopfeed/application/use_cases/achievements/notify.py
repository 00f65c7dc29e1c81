"""Use case that notifies a user when a metric update unlocks a new level."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy.orm import Session

from shopfeed.application.use_cases.notifications import dispatch_notification
from shopfeed.application.use_cases.notifications.validators import normalize_id
from shopfeed.config import get_settings
from shopfeed.domain.entities import AchievementTier, Notification, NotificationType
from shopfeed.infrastructure.notifications import NotificationPublisher
from shopfeed.infrastructure.repositories import (
    AchievementThresholdRepository,
    NotificationRepository,
)
from shopfeed.utils import now_in_app_timezone, start_of_month

from .evaluate import evaluate_achievement, render_achievement_message

logger = logging.getLogger(__name__)


def notify_achievement(
    session: Session,
    *,
    user_id: str,
    previous_metric: float,
    current_metric: float,
    thresholds: Iterable[AchievementTier | Mapping[str, Any]] | None = None,
    publisher: NotificationPublisher | None = None,
) -> tuple[AchievementTier | None, Notification | None]:
    """Evaluate a metric change and dispatch an achievement notification.

    Returns the newly reached tier (or ``None``) and the dispatched
    notification (``None`` when nothing was sent). Levels already announced
    to the user during the current month are not announced again.
    """

    settings = get_settings()
    recipient_id = normalize_id(user_id, field="user id")
    tiers = (
        list(thresholds)
        if thresholds is not None
        else AchievementThresholdRepository(session).list()
    )
    reached_level = NotificationRepository(session).highest_achievement_level(
        recipient_id, since=start_of_month()
    )
    tier = evaluate_achievement(
        recipient_id,
        previous_metric,
        current_metric,
        tiers,
        reached_level=reached_level,
    )
    if tier is None:
        return None, None

    if not settings.achievement_notifications_enabled:
        logger.info(
            "Level %s reached by user %s but achievement notifications are disabled",
            tier.level,
            recipient_id,
        )
        return tier, None

    message = render_achievement_message(
        settings.achievement_notification_message,
        level=tier.level,
        profit=current_metric,
        threshold=tier.threshold,
    )
    title = render_achievement_message(
        settings.achievement_notification_title,
        level=tier.level,
        profit=current_metric,
        threshold=tier.threshold,
    )
    notification = dispatch_notification(
        session,
        sender_id=None,
        title=title,
        message=message,
        type=NotificationType.ACHIEVEMENT,
        recipient_ids=[recipient_id],
        metadata={
            "level": tier.level,
            "profit": current_metric,
            "threshold": tier.threshold,
            "timestamp": now_in_app_timezone().isoformat(),
        },
        publisher=publisher,
    )
    return tier, notification


__all__ = ["notify_achievement"]
