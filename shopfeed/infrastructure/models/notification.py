"""SQLAlchemy models for notifications and their per-recipient delivery rows."""

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from shopfeed.infrastructure.database import Base


class NotificationModel(Base):
    """Database representation of an immutable notification."""

    __tablename__ = "notification"

    id = Column(String(36), primary_key=True)
    created_at = Column(DateTime(), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, index=True)
    sender_id = Column(String(36), ForeignKey("user.id"), nullable=True, index=True)
    # ``metadata`` is reserved on declarative classes.
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    expires_at = Column(DateTime(), nullable=True, index=True)

    recipients = relationship(
        "NotificationRecipientModel",
        back_populates="notification",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class NotificationRecipientModel(Base):
    """Delivery record linking a notification with one recipient."""

    __tablename__ = "notification_recipient"
    __table_args__ = (
        UniqueConstraint(
            "notification_id", "recipient_id", name="uq_notification_recipient"
        ),
        Index("ix_notification_recipient_unread", "recipient_id", "read_at"),
    )

    id = Column(String(36), primary_key=True)
    notification_id = Column(
        String(36),
        ForeignKey("notification.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    recipient_id = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    read_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False)

    notification = relationship(
        "NotificationModel", back_populates="recipients", lazy="joined"
    )


__all__ = ["NotificationModel", "NotificationRecipientModel"]
