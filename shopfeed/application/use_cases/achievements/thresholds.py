"""Use cases for reading and replacing achievement thresholds."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy.orm import Session

from shopfeed.domain.entities import AchievementTier
from shopfeed.domain.errors import InvalidArgument
from shopfeed.infrastructure.repositories import AchievementThresholdRepository

from .evaluate import coerce_tier


def list_thresholds(session: Session) -> list[AchievementTier]:
    return AchievementThresholdRepository(session).list()


def validate_thresholds(
    tiers: Iterable[AchievementTier | Mapping[str, Any]],
) -> list[AchievementTier]:
    """Return ``tiers`` sorted by level, rejecting inconsistent definitions.

    Levels must be positive and unique, thresholds non-negative and
    non-decreasing as the level grows.
    """

    ordered = sorted((coerce_tier(tier) for tier in tiers), key=lambda tier: tier.level)
    previous: AchievementTier | None = None
    for tier in ordered:
        if tier.level <= 0:
            raise InvalidArgument("Achievement levels must be positive")
        if tier.threshold < 0:
            raise InvalidArgument("Achievement thresholds cannot be negative")
        if previous is not None:
            if tier.level == previous.level:
                raise InvalidArgument(f"Duplicated achievement level {tier.level}")
            if tier.threshold < previous.threshold:
                raise InvalidArgument(
                    f"Threshold for level {tier.level} is lower than level {previous.level}"
                )
        previous = tier
    return ordered


def replace_thresholds(
    session: Session, tiers: Iterable[AchievementTier | Mapping[str, Any]]
) -> list[AchievementTier]:
    """Validate ``tiers`` and store them in place of the current ones."""

    ordered = validate_thresholds(tiers)
    return AchievementThresholdRepository(session).replace_all(ordered)


__all__ = ["list_thresholds", "replace_thresholds", "validate_thresholds"]
