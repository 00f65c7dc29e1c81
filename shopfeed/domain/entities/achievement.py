"""Domain entities for achievement tiers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class AchievementTier:
    """A level reached once a metric is at or above ``threshold``."""

    level: int
    threshold: float


__all__ = ["AchievementTier"]
