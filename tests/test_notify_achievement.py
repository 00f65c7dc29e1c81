"""Tests for achievement notifications backed by the store."""

from __future__ import annotations

import pytest

from shopfeed.application.use_cases.achievements import (
    list_thresholds,
    notify_achievement,
    replace_thresholds,
)
from shopfeed.application.use_cases.notifications import list_my_notifications
from shopfeed.config import reset_settings_cache
from shopfeed.domain.entities import AchievementTier, NotificationType
from shopfeed.domain.errors import InvalidArgument, TransientStoreFailure


@pytest.fixture()
def thresholds(session):
    return replace_thresholds(
        session,
        [
            {"level": 3, "threshold": 10000},
            {"level": 1, "threshold": 1000},
            {"level": 2, "threshold": 5000},
        ],
    )


def test_replace_thresholds_stores_sorted_tiers(session, thresholds) -> None:
    assert [tier.level for tier in thresholds] == [1, 2, 3]
    assert list_thresholds(session)[1] == AchievementTier(level=2, threshold=5000.0)


def test_crossing_a_threshold_sends_a_system_achievement(
    session, make_user, publisher, thresholds
) -> None:
    user = make_user()

    tier, notification = notify_achievement(
        session,
        user_id=user.id,
        previous_metric=800,
        current_metric=1200,
        publisher=publisher,
    )

    assert tier == AchievementTier(level=1, threshold=1000.0)
    assert notification is not None
    assert notification.type is NotificationType.ACHIEVEMENT
    assert notification.sender_id is None
    assert notification.message == (
        "Congratulations! You've reached Level 1 with $1200.00 profit this month!"
    )
    assert notification.metadata["level"] == 1
    assert notification.metadata["profit"] == 1200
    assert notification.metadata["threshold"] == 1000.0
    assert "timestamp" in notification.metadata


def test_levels_already_announced_this_month_are_not_repeated(
    session, make_user, publisher, thresholds
) -> None:
    user = make_user()

    notify_achievement(
        session, user_id=user.id, previous_metric=1200, current_metric=6000, publisher=publisher
    )
    tier, notification = notify_achievement(
        session, user_id=user.id, previous_metric=4000, current_metric=6000, publisher=publisher
    )

    assert tier is None
    assert notification is None
    assert len(list_my_notifications(session, user_id=user.id)) == 1


def test_explicit_thresholds_override_stored_ones(session, make_user, publisher) -> None:
    user = make_user()

    tier, notification = notify_achievement(
        session,
        user_id=user.id,
        previous_metric=0,
        current_metric=50,
        thresholds=[{"level": 1, "threshold": 10}],
        publisher=publisher,
    )

    assert tier.level == 1
    assert notification is not None


def test_disabled_achievements_do_not_dispatch(
    session, make_user, publisher, thresholds, monkeypatch
) -> None:
    monkeypatch.setenv("ACHIEVEMENT_NOTIFICATIONS_ENABLED", "false")
    reset_settings_cache()
    user = make_user()
    try:
        tier, notification = notify_achievement(
            session,
            user_id=user.id,
            previous_metric=0,
            current_metric=20000,
            publisher=publisher,
        )
    finally:
        monkeypatch.delenv("ACHIEVEMENT_NOTIFICATIONS_ENABLED")
        reset_settings_cache()

    assert tier.level == 3
    assert notification is None
    assert list_my_notifications(session, user_id=user.id) == []


def test_non_finite_metric_is_rejected_before_dispatch(
    session, make_user, publisher, thresholds
) -> None:
    user = make_user()

    with pytest.raises(InvalidArgument):
        notify_achievement(
            session,
            user_id=user.id,
            previous_metric=0,
            current_metric=float("nan"),
            publisher=publisher,
        )
    assert list_my_notifications(session, user_id=user.id) == []


def test_threshold_store_outage_surfaces_as_transient_failure(
    unreachable_session_factory,
) -> None:
    broken = unreachable_session_factory()
    try:
        with pytest.raises(TransientStoreFailure):
            list_thresholds(broken)
    finally:
        broken.close()
