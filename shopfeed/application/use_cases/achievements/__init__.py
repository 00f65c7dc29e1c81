"""Use cases for achievement levels."""

from .evaluate import (
    coerce_tier,
    evaluate_achievement,
    render_achievement_message,
    resolve_level,
)
from .notify import notify_achievement
from .thresholds import list_thresholds, replace_thresholds, validate_thresholds

__all__ = [
    "coerce_tier",
    "evaluate_achievement",
    "list_thresholds",
    "notify_achievement",
    "render_achievement_message",
    "replace_thresholds",
    "resolve_level",
    "validate_thresholds",
]
