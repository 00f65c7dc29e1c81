"""Pure helpers that decide when an achievement level is newly reached."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from shopfeed.domain.entities import AchievementTier
from shopfeed.domain.errors import InvalidArgument


def _finite(value: Any, *, field: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"{field} must be a number") from exc
    if not math.isfinite(number):
        raise InvalidArgument(f"{field} must be a finite number")
    return number


def coerce_tier(value: AchievementTier | Mapping[str, Any]) -> AchievementTier:
    """Accept tiers as entities or as ``{level, threshold}`` mappings.

    ``profit_threshold`` is accepted as an alias of ``threshold``.
    """

    if isinstance(value, AchievementTier):
        level, threshold = value.level, value.threshold
    else:
        level = value.get("level")
        threshold = value.get("threshold", value.get("profit_threshold"))
    try:
        level = int(level)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument("Tier level must be an integer") from exc
    return AchievementTier(level=level, threshold=_finite(threshold, field="threshold"))


def resolve_level(
    metric: float, thresholds: Iterable[AchievementTier | Mapping[str, Any]]
) -> AchievementTier | None:
    """Return the highest tier whose threshold is ``<= metric``.

    When two tiers share a threshold the higher level wins.
    """

    metric = _finite(metric, field="metric")
    reached: AchievementTier | None = None
    for tier in (coerce_tier(item) for item in thresholds):
        if metric < tier.threshold:
            continue
        if reached is None or (tier.threshold, tier.level) > (reached.threshold, reached.level):
            reached = tier
    return reached


def evaluate_achievement(
    user_id: str,
    previous_metric: float,
    current_metric: float,
    thresholds: Iterable[AchievementTier | Mapping[str, Any]],
    *,
    reached_level: int = 0,
) -> AchievementTier | None:
    """Return the tier newly reached by ``user_id``, if any.

    A tier is only returned when its level is strictly higher than both the
    level of ``previous_metric`` and ``reached_level``, the highest level the
    user was already notified about. Drops never notify and climbing back to
    an already reached level does not notify again.
    """

    previous_metric = _finite(previous_metric, field="previous metric")
    current_metric = _finite(current_metric, field="current metric")
    tiers = [coerce_tier(item) for item in thresholds]
    current = resolve_level(current_metric, tiers)
    if current is None:
        return None
    previous = resolve_level(previous_metric, tiers)
    baseline = max(previous.level if previous else 0, reached_level)
    if current.level > baseline:
        return current
    return None


def render_achievement_message(
    template: str, *, level: int, profit: float, threshold: float
) -> str:
    """Fill ``{level}``, ``{profit}`` and ``{threshold}`` placeholders."""

    return (
        template.replace("{level}", str(level))
        .replace("{profit}", f"{profit:.2f}")
        .replace("{threshold}", f"{threshold:.2f}")
    )


__all__ = [
    "coerce_tier",
    "evaluate_achievement",
    "render_achievement_message",
    "resolve_level",
]
