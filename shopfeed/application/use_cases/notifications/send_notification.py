"""Use case for notifications written by admins and leaders."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from sqlalchemy.orm import Session

from shopfeed.domain.entities import Notification, NotificationType, User
from shopfeed.domain.errors import InvalidArgument, PermissionDenied
from shopfeed.infrastructure.notifications import NotificationPublisher
from shopfeed.infrastructure.repositories import UserRepository
from shopfeed.utils import now_in_app_timezone

from .dispatch import dispatch_notification
from .validators import normalize_recipient_ids


class RecipientTarget(str, Enum):
    """Audience selector for manual notifications."""

    ALL = "all"
    TEAM = "team"
    SPECIFIC = "specific"


def resolve_recipients(
    session: Session,
    *,
    sender: User,
    target: RecipientTarget | str,
    recipient_ids: Iterable[str] | None = None,
) -> list[str]:
    """Return the recipient ids ``sender`` may address for ``target``.

    Admins may address everybody; leaders only the members of their team;
    members cannot send notifications at all.
    """

    if not (sender.is_admin() or sender.is_leader()):
        raise PermissionDenied("Only admins and leaders can send notifications")

    try:
        target = RecipientTarget(target)
    except ValueError as exc:
        raise InvalidArgument(f"Unknown recipient target {target!r}") from exc

    repository = UserRepository(session)
    if target is RecipientTarget.ALL:
        if not sender.is_admin():
            raise PermissionDenied("Only admins can notify every user")
        eligible = [user.id for user in repository.list_active() if user.id != sender.id]
    elif target is RecipientTarget.TEAM:
        eligible = [user.id for user in repository.list_team(sender.id)]
    else:
        requested = normalize_recipient_ids(recipient_ids or [])
        if sender.is_admin():
            return requested
        team = {user.id for user in repository.list_team(sender.id)}
        outside = [recipient for recipient in requested if recipient not in team]
        if outside:
            raise PermissionDenied("Leaders can only notify members of their team")
        return requested

    if not eligible:
        raise InvalidArgument("No recipients selected")
    return eligible


def send_notification(
    session: Session,
    *,
    sender: User,
    title: str,
    message: str,
    target: RecipientTarget | str = RecipientTarget.SPECIFIC,
    recipient_ids: Iterable[str] | None = None,
    publisher: NotificationPublisher | None = None,
) -> tuple[Notification, int]:
    """Send a manual notification and return it with its recipient count."""

    recipients = resolve_recipients(
        session, sender=sender, target=target, recipient_ids=recipient_ids
    )
    notification = dispatch_notification(
        session,
        sender_id=sender.id,
        title=title,
        message=message,
        type=NotificationType.MANUAL,
        recipient_ids=recipients,
        metadata={"timestamp": now_in_app_timezone().isoformat()},
        publisher=publisher,
    )
    return notification, len(recipients)


__all__ = ["RecipientTarget", "resolve_recipients", "send_notification"]
