"""SQLAlchemy model for the user table."""

from sqlalchemy import Boolean, Column, ForeignKey, String

from shopfeed.infrastructure.database import Base


class UserModel(Base):
    """Database representation of a dashboard user."""

    __tablename__ = "user"

    id = Column(String(36), primary_key=True)
    name = Column(String(120), nullable=False)
    email = Column(String(120), nullable=False, unique=True, index=True)
    role = Column(String(20), nullable=False, default="member")
    leader_id = Column(String(36), ForeignKey("user.id"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)


__all__ = ["UserModel"]
