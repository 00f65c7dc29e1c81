"""Validation helpers for notification use cases."""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from shopfeed.domain.entities import NotificationType
from shopfeed.domain.errors import InvalidArgument


def normalize_id(value: object, *, field: str = "id") -> str:
    """Return ``value`` as a canonical UUID string or raise ``InvalidArgument``."""

    if isinstance(value, UUID):
        return str(value)
    if not isinstance(value, str):
        raise InvalidArgument(f"Malformed {field}: {value!r}")
    try:
        return str(UUID(value.strip()))
    except ValueError as exc:
        raise InvalidArgument(f"Malformed {field}: {value!r}") from exc


def normalize_recipient_ids(recipient_ids: Iterable[object]) -> list[str]:
    """Validate and de-duplicate recipient ids, preserving their first order."""

    unique: list[str] = []
    seen: set[str] = set()
    for raw in recipient_ids:
        recipient_id = normalize_id(raw, field="recipient id")
        if recipient_id in seen:
            continue
        seen.add(recipient_id)
        unique.append(recipient_id)
    if not unique:
        raise InvalidArgument("At least one recipient is required")
    return unique


def require_text(value: str | None, *, field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidArgument(f"The notification {field} cannot be empty")
    return text


def coerce_type(value: NotificationType | str) -> NotificationType:
    try:
        return NotificationType(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in NotificationType)
        raise InvalidArgument(
            f"Unknown notification type {value!r}; expected one of: {allowed}"
        ) from exc


__all__ = [
    "coerce_type",
    "normalize_id",
    "normalize_recipient_ids",
    "require_text",
]
