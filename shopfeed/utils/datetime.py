"""Timestamps in the configured application timezone.

``DateTime`` columns store naive values expressed in that timezone; the
domain layer always works with aware values.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from shopfeed.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _app_timezone() -> tzinfo:
    name = (get_settings().app_timezone or "").strip()
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown APP_TIMEZONE %r, using UTC", name)
        return timezone.utc


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=_app_timezone())


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Attach or convert ``value`` to the app timezone; naive values are taken as local."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=_app_timezone())
    return value.astimezone(_app_timezone())


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Return the column representation of ``value``."""

    localized = ensure_app_timezone(value)
    return localized.replace(tzinfo=None) if localized else None


def start_of_month(value: datetime | None = None) -> datetime:
    """Return midnight of the first day of the month containing ``value``."""

    localized = ensure_app_timezone(value) or now_in_app_timezone()
    return localized.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
