"""Persistence layer for achievement thresholds."""

from __future__ import annotations

from collections.abc import Iterable

from shopfeed.domain.entities import AchievementTier
from shopfeed.infrastructure.models import AchievementThresholdModel

from .base import SessionRepository


class AchievementThresholdRepository(SessionRepository):
    """Read and replace the configured achievement tiers."""

    store_name = "threshold store"

    def list(self) -> list[AchievementTier]:
        with self._store_errors():
            models = (
                self.session.query(AchievementThresholdModel)
                .order_by(AchievementThresholdModel.level.asc())
                .all()
            )
        return [self._to_entity(model) for model in models]

    def replace_all(self, tiers: Iterable[AchievementTier]) -> list[AchievementTier]:
        """Swap the stored tiers for ``tiers`` in a single transaction."""

        with self._store_errors():
            self.session.query(AchievementThresholdModel).delete(synchronize_session=False)
            for tier in tiers:
                self.session.add(
                    AchievementThresholdModel(level=tier.level, threshold=tier.threshold)
                )
            self.session.commit()
        return self.list()

    @staticmethod
    def _to_entity(model: AchievementThresholdModel) -> AchievementTier:
        return AchievementTier(level=model.level, threshold=float(model.threshold))


__all__ = ["AchievementThresholdRepository"]
