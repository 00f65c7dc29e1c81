"""Tests for the pure achievement threshold helpers."""

from __future__ import annotations

import pytest

from shopfeed.application.use_cases.achievements import (
    evaluate_achievement,
    render_achievement_message,
    resolve_level,
    validate_thresholds,
)
from shopfeed.domain.entities import AchievementTier
from shopfeed.domain.errors import InvalidArgument

THRESHOLDS = [
    {"level": 1, "threshold": 1000},
    {"level": 2, "threshold": 5000},
    {"level": 3, "threshold": 10000},
]


def test_evaluation_sequence_only_notifies_strictly_higher_levels() -> None:
    """Walk a user through rises, a drop and a re-crossing of level 2."""

    reached = 0

    tier = evaluate_achievement("u", 800, 1200, THRESHOLDS, reached_level=reached)
    assert tier == AchievementTier(level=1, threshold=1000)
    reached = tier.level

    assert evaluate_achievement("u", 1200, 1200, THRESHOLDS, reached_level=reached) is None

    tier = evaluate_achievement("u", 1200, 6000, THRESHOLDS, reached_level=reached)
    assert tier == AchievementTier(level=2, threshold=5000)
    reached = tier.level

    assert evaluate_achievement("u", 6000, 4000, THRESHOLDS, reached_level=reached) is None
    assert evaluate_achievement("u", 4000, 6000, THRESHOLDS, reached_level=reached) is None


@pytest.mark.parametrize(
    ("previous", "current", "expected"),
    [
        (800, 1200, 1),
        (0, 10000, 3),
        (999.99, 1000, 1),
        (5000, 9999, None),
        (12000, 500, None),
        (0, 999, None),
    ],
)
def test_evaluate_without_history(previous, current, expected) -> None:
    tier = evaluate_achievement("u", previous, current, THRESHOLDS)
    assert (tier.level if tier else None) == expected


def test_resolve_level_prefers_higher_level_on_equal_thresholds() -> None:
    tiers = [AchievementTier(1, 100), AchievementTier(2, 100), AchievementTier(3, 500)]

    assert resolve_level(150, tiers) == AchievementTier(2, 100)
    assert resolve_level(50, tiers) is None


def test_resolve_level_accepts_profit_threshold_alias() -> None:
    tier = resolve_level(2000, [{"level": 4, "profit_threshold": 1500}])
    assert tier == AchievementTier(level=4, threshold=1500.0)


def test_render_achievement_message_formats_money_values() -> None:
    message = render_achievement_message(
        "Level {level}: ${profit} (goal {threshold})",
        level=2,
        profit=6000,
        threshold=5000,
    )
    assert message == "Level 2: $6000.00 (goal 5000.00)"


def test_validate_thresholds_sorts_by_level() -> None:
    ordered = validate_thresholds([{"level": 2, "threshold": 50}, {"level": 1, "threshold": 10}])
    assert [tier.level for tier in ordered] == [1, 2]


@pytest.mark.parametrize(
    "tiers",
    [
        [{"level": 0, "threshold": 10}],
        [{"level": 1, "threshold": -1}],
        [{"level": 1, "threshold": 10}, {"level": 1, "threshold": 20}],
        [{"level": 1, "threshold": 100}, {"level": 2, "threshold": 50}],
    ],
)
def test_validate_thresholds_rejects_inconsistent_tiers(tiers) -> None:
    with pytest.raises(InvalidArgument):
        validate_thresholds(tiers)


@pytest.mark.parametrize("metric", [float("nan"), float("inf"), float("-inf"), "lots"])
def test_non_finite_metrics_are_rejected(metric) -> None:
    with pytest.raises(InvalidArgument):
        evaluate_achievement("u", 0, metric, THRESHOLDS)
    with pytest.raises(InvalidArgument):
        evaluate_achievement("u", metric, 1200, THRESHOLDS)


@pytest.mark.parametrize(
    "tier",
    [
        {"level": 1, "threshold": float("nan")},
        {"level": 1, "threshold": float("inf")},
        {"level": "first", "threshold": 10},
        {"threshold": 10},
    ],
)
def test_malformed_tiers_are_rejected(tier) -> None:
    with pytest.raises(InvalidArgument):
        resolve_level(100, [tier])
