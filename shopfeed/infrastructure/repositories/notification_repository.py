"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.orm import contains_eager

from shopfeed.domain.entities import (
    DeliveryRecord,
    Notification,
    NotificationType,
    NotificationWithStatus,
    SentNotificationSummary,
)
from shopfeed.domain.errors import PartialWriteError
from shopfeed.infrastructure.models import NotificationModel, NotificationRecipientModel
from shopfeed.utils import ensure_app_naive_datetime, ensure_app_timezone

from .base import SessionRepository


class NotificationRepository(SessionRepository):
    """Provide storage operations for notifications and delivery records.

    Every read and write that concerns delivery state is scoped by
    ``recipient_id``; callers pass the authenticated user's id and the
    repository never touches rows that belong to somebody else.
    """

    store_name = "notification store"

    def create_with_recipients(
        self, notification: Notification, recipient_ids: Sequence[str]
    ) -> list[DeliveryRecord]:
        """Persist ``notification`` and one delivery row per recipient atomically."""

        created_at = ensure_app_naive_datetime(notification.created_at)
        model = NotificationModel(
            id=notification.id,
            created_at=created_at,
            title=notification.title,
            message=notification.message,
            type=notification.type.value,
            sender_id=notification.sender_id,
            metadata_=dict(notification.metadata),
            expires_at=ensure_app_naive_datetime(notification.expires_at),
        )
        model.recipients = [
            NotificationRecipientModel(
                id=str(uuid4()),
                recipient_id=recipient_id,
                read_at=None,
                created_at=created_at,
            )
            for recipient_id in recipient_ids
        ]
        with self._store_errors():
            self.session.add(model)
            self.session.flush()
            stored = (
                self.session.query(func.count(NotificationRecipientModel.id))
                .filter(NotificationRecipientModel.notification_id == notification.id)
                .scalar()
            )
            if stored != len(recipient_ids):
                self.session.rollback()
                raise PartialWriteError(
                    f"Expected {len(recipient_ids)} delivery records, found {stored}"
                )
            self.session.commit()
            return [self._to_delivery_record(row) for row in model.recipients]

    def get(self, notification_id: str) -> Notification | None:
        with self._store_errors():
            model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_delivery_records(self, notification_id: str) -> list[DeliveryRecord]:
        with self._store_errors():
            rows = (
                self.session.query(NotificationRecipientModel)
                .filter(NotificationRecipientModel.notification_id == notification_id)
                .order_by(NotificationRecipientModel.recipient_id)
                .all()
            )
        return [self._to_delivery_record(row) for row in rows]

    def list_for_recipient(
        self,
        recipient_id: str,
        *,
        limit: int | None = 50,
        unread_only: bool = False,
    ) -> list[NotificationWithStatus]:
        query = self._recipient_query(recipient_id)
        if unread_only:
            query = query.filter(NotificationRecipientModel.read_at.is_(None))
        query = query.order_by(
            NotificationRecipientModel.created_at.desc(),
            NotificationRecipientModel.notification_id.desc(),
        )
        if limit is not None:
            query = query.limit(limit)
        with self._store_errors():
            rows = query.all()
        return [self._to_status(row) for row in rows]

    def get_for_recipient(
        self, recipient_id: str, notification_id: str
    ) -> NotificationWithStatus | None:
        query = self._recipient_query(recipient_id).filter(
            NotificationRecipientModel.notification_id == notification_id
        )
        with self._store_errors():
            row = query.first()
        return self._to_status(row) if row else None

    def count_unread(self, recipient_id: str) -> int:
        with self._store_errors():
            count = (
                self.session.query(func.count(NotificationRecipientModel.id))
                .filter(NotificationRecipientModel.recipient_id == recipient_id)
                .filter(NotificationRecipientModel.read_at.is_(None))
                .scalar()
            )
        return int(count or 0)

    def mark_read(
        self, recipient_id: str, notification_id: str, *, read_at: datetime
    ) -> int:
        """Set ``read_at`` on the caller's unread row for ``notification_id``."""

        with self._store_errors():
            updated = (
                self.session.query(NotificationRecipientModel)
                .filter(
                    NotificationRecipientModel.notification_id == notification_id,
                    NotificationRecipientModel.recipient_id == recipient_id,
                    NotificationRecipientModel.read_at.is_(None),
                )
                .update(
                    {NotificationRecipientModel.read_at: ensure_app_naive_datetime(read_at)},
                    synchronize_session=False,
                )
            )
            self.session.commit()
        return int(updated or 0)

    def mark_all_read(self, recipient_id: str, *, read_at: datetime) -> int:
        """Set ``read_at`` on every unread row owned by ``recipient_id``."""

        with self._store_errors():
            updated = (
                self.session.query(NotificationRecipientModel)
                .filter(
                    NotificationRecipientModel.recipient_id == recipient_id,
                    NotificationRecipientModel.read_at.is_(None),
                )
                .update(
                    {NotificationRecipientModel.read_at: ensure_app_naive_datetime(read_at)},
                    synchronize_session=False,
                )
            )
            self.session.commit()
        return int(updated or 0)

    def list_sent_by(
        self, sender_id: str, *, limit: int | None = 50
    ) -> list[SentNotificationSummary]:
        recipient_count = func.count(NotificationRecipientModel.id)
        read_count = func.count(NotificationRecipientModel.read_at)
        query = (
            self.session.query(NotificationModel, recipient_count, read_count)
            .outerjoin(
                NotificationRecipientModel,
                NotificationRecipientModel.notification_id == NotificationModel.id,
            )
            .filter(NotificationModel.sender_id == sender_id)
            .group_by(NotificationModel.id)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        with self._store_errors():
            rows = query.all()
        return [
            SentNotificationSummary(
                notification=self._to_entity(model),
                recipient_count=int(total or 0),
                read_count=int(read or 0),
            )
            for model, total, read in rows
        ]

    def highest_achievement_level(
        self, recipient_id: str, *, since: datetime | None = None
    ) -> int:
        """Return the highest ``metadata.level`` already delivered to ``recipient_id``."""

        query = (
            self.session.query(NotificationModel.metadata_)
            .join(
                NotificationRecipientModel,
                NotificationRecipientModel.notification_id == NotificationModel.id,
            )
            .filter(NotificationRecipientModel.recipient_id == recipient_id)
            .filter(NotificationModel.type == NotificationType.ACHIEVEMENT.value)
        )
        if since is not None:
            query = query.filter(
                NotificationModel.created_at >= ensure_app_naive_datetime(since)
            )
        with self._store_errors():
            rows = query.all()

        highest = 0
        for (metadata,) in rows:
            try:
                level = int((metadata or {}).get("level"))
            except (TypeError, ValueError):
                continue
            highest = max(highest, level)
        return highest

    def count_expired(self, *, now: datetime) -> int:
        """Return how many notifications ``delete_expired`` would remove."""

        with self._store_errors():
            count = self.session.scalar(
                select(func.count()).select_from(self._expired_ids(now).subquery())
            )
        return int(count or 0)

    def delete_expired(self, *, now: datetime) -> int:
        """Remove notifications whose ``expires_at`` lies before ``now``."""

        cutoff = ensure_app_naive_datetime(now)
        expired_ids = self._expired_ids(now)
        with self._store_errors():
            self.session.query(NotificationRecipientModel).filter(
                NotificationRecipientModel.notification_id.in_(expired_ids)
            ).delete(synchronize_session=False)
            deleted = (
                self.session.query(NotificationModel)
                .filter(NotificationModel.expires_at.is_not(None))
                .filter(NotificationModel.expires_at < cutoff)
                .delete(synchronize_session=False)
            )
            self.session.commit()
        return int(deleted or 0)

    @staticmethod
    def _expired_ids(now: datetime):
        cutoff = ensure_app_naive_datetime(now)
        return (
            select(NotificationModel.id)
            .where(NotificationModel.expires_at.is_not(None))
            .where(NotificationModel.expires_at < cutoff)
        )

    def _recipient_query(self, recipient_id: str):
        return (
            self.session.query(NotificationRecipientModel)
            .join(
                NotificationModel,
                NotificationModel.id == NotificationRecipientModel.notification_id,
            )
            .options(contains_eager(NotificationRecipientModel.notification))
            .filter(NotificationRecipientModel.recipient_id == recipient_id)
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            created_at=ensure_app_timezone(model.created_at),
            title=model.title,
            message=model.message,
            type=NotificationType(model.type),
            sender_id=model.sender_id,
            metadata=dict(model.metadata_ or {}),
            expires_at=ensure_app_timezone(model.expires_at),
        )

    @staticmethod
    def _to_delivery_record(model: NotificationRecipientModel) -> DeliveryRecord:
        return DeliveryRecord(
            id=model.id,
            notification_id=model.notification_id,
            recipient_id=model.recipient_id,
            created_at=ensure_app_timezone(model.created_at),
            read_at=ensure_app_timezone(model.read_at),
        )

    @classmethod
    def _to_status(cls, model: NotificationRecipientModel) -> NotificationWithStatus:
        return NotificationWithStatus(
            notification=cls._to_entity(model.notification),
            recipient_id=model.recipient_id,
            read_at=ensure_app_timezone(model.read_at),
        )


__all__ = ["NotificationRepository"]
