"""Exceptions raised by the notification core."""

from __future__ import annotations


class NotificationError(Exception):
    """Base class for every error surfaced by the notification service."""


class InvalidArgument(NotificationError, ValueError):
    """Input rejected before any write took place."""


class NotFound(NotificationError, LookupError):
    """The caller referenced an entity that does not exist for them."""


class PermissionDenied(NotificationError):
    """The caller is not allowed to perform the requested operation."""


class TransientStoreFailure(NotificationError):
    """The underlying store is unavailable; the caller may retry."""


class PartialWriteError(NotificationError):
    """A dispatch left delivery records behind without its full recipient set.

    The dispatcher commits a notification and all its delivery records in one
    transaction, so this is only raised if that guarantee is violated.
    """


__all__ = [
    "NotificationError",
    "InvalidArgument",
    "NotFound",
    "PermissionDenied",
    "TransientStoreFailure",
    "PartialWriteError",
]
