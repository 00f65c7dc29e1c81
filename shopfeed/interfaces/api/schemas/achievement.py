"""Pydantic models for achievement thresholds and evaluations."""

from __future__ import annotations

from pydantic import BaseModel, Field


class AchievementTierSchema(BaseModel):
    level: int = Field(..., gt=0)
    threshold: float = Field(..., ge=0, allow_inf_nan=False)


class AchievementThresholdsUpdate(BaseModel):
    tiers: list[AchievementTierSchema] = Field(default_factory=list)


class AchievementEvaluateRequest(BaseModel):
    """Metric values before and after an update for the authenticated user."""

    previous_metric: float = Field(..., allow_inf_nan=False)
    current_metric: float = Field(..., allow_inf_nan=False)


class AchievementEvaluateResponse(BaseModel):
    reached: AchievementTierSchema | None = None
    notification_id: str | None = None


__all__ = [
    "AchievementEvaluateRequest",
    "AchievementEvaluateResponse",
    "AchievementThresholdsUpdate",
    "AchievementTierSchema",
]
