"""SQLAlchemy model for configured achievement thresholds."""

from sqlalchemy import Column, Integer, Numeric

from shopfeed.infrastructure.database import Base


class AchievementThresholdModel(Base):
    """Metric boundary that unlocks an achievement level."""

    __tablename__ = "achievement_threshold"

    id = Column(Integer, primary_key=True, index=True)
    level = Column(Integer, nullable=False, unique=True)
    threshold = Column(Numeric(14, 2, asdecimal=False), nullable=False)


__all__ = ["AchievementThresholdModel"]
