"""Use cases for dispatching, reading and following notifications."""

from .dispatch import dispatch_notification
from .inbox import InboxSnapshot, NotificationInbox
from .list_notifications import (
    get_my_notification,
    list_my_notifications,
    list_sent_notifications,
)
from .read_state import count_unread, mark_all_read, mark_many_read, mark_read
from .send_notification import RecipientTarget, resolve_recipients, send_notification

__all__ = [
    "InboxSnapshot",
    "NotificationInbox",
    "RecipientTarget",
    "count_unread",
    "dispatch_notification",
    "get_my_notification",
    "list_my_notifications",
    "list_sent_notifications",
    "mark_all_read",
    "mark_many_read",
    "mark_read",
    "resolve_recipients",
    "send_notification",
]
