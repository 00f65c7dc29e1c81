"""Endpoints for achievement thresholds and metric evaluations."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shopfeed.application.use_cases.achievements import (
    list_thresholds as list_thresholds_uc,
    notify_achievement,
    replace_thresholds as replace_thresholds_uc,
)
from shopfeed.domain.entities import AchievementTier, User
from shopfeed.domain.errors import NotificationError
from shopfeed.infrastructure.database import get_db
from shopfeed.interfaces.api.dependencies import get_current_active_user, require_admin
from shopfeed.interfaces.api.routes_helpers import to_http_exception
from shopfeed.interfaces.api.schemas import (
    AchievementEvaluateRequest,
    AchievementEvaluateResponse,
    AchievementThresholdsUpdate,
    AchievementTierSchema,
)

router = APIRouter(prefix="/achievements", tags=["achievements"])


def _to_schema(tier: AchievementTier) -> AchievementTierSchema:
    return AchievementTierSchema(level=tier.level, threshold=tier.threshold)


@router.get("/thresholds", response_model=list[AchievementTierSchema])
def list_thresholds(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> list[AchievementTierSchema]:
    try:
        tiers = list_thresholds_uc(db)
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return [_to_schema(tier) for tier in tiers]


@router.put("/thresholds", response_model=list[AchievementTierSchema])
def replace_thresholds(
    payload: AchievementThresholdsUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> list[AchievementTierSchema]:
    """Replace the configured achievement tiers."""

    try:
        tiers = replace_thresholds_uc(
            db,
            [AchievementTier(level=tier.level, threshold=tier.threshold) for tier in payload.tiers],
        )
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return [_to_schema(tier) for tier in tiers]


@router.post("/evaluate", response_model=AchievementEvaluateResponse)
def evaluate_metric(
    payload: AchievementEvaluateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> AchievementEvaluateResponse:
    """Check whether the caller's metric update unlocked a new level."""

    try:
        tier, notification = notify_achievement(
            db,
            user_id=current_user.id,
            previous_metric=payload.previous_metric,
            current_metric=payload.current_metric,
        )
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return AchievementEvaluateResponse(
        reached=_to_schema(tier) if tier else None,
        notification_id=notification.id if notification else None,
    )
