"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Iterable

from sqlalchemy import func, insert
from sqlalchemy.orm import Session

from app.domain.entities import Notification, NotificationType
from app.infrastructure.models import NotificationModel, UserModel
from app.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create_many(self, notifications: Sequence[Notification]) -> list[Notification]:
        """Insert ``notifications`` with a single statement and commit.

        Identities must already be assigned. The session is rolled back and
        the database error re-raised if the write fails.
        """

        if not notifications:
            return []

        rows = [self._to_row(notification) for notification in notifications]
        try:
            self.session.execute(insert(NotificationModel), rows)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return list(notifications)

    def list_for_user(
        self,
        user_id: str,
        *,
        limit: int | None = 20,
        unread_only: bool = False,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        if unread_only:
            query = query.filter(NotificationModel.is_read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(self, user_id: str) -> int:
        return (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
            .scalar()
            or 0
        )

    def mark_as_read(self, notification_ids: Iterable[str], *, user_id: str) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id]
        if not ids:
            return 0
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id.in_(ids),
                NotificationModel.user_id == user_id,
            )
            .update({NotificationModel.is_read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    def mark_all_as_read(self, *, user_id: str) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
            .update({NotificationModel.is_read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    def list_all(
        self, *, offset: int = 0, limit: int = 50
    ) -> list[tuple[Notification, str | None, str | None]]:
        """Return notifications of every user with the recipient name and email."""

        query = (
            self.session.query(NotificationModel, UserModel.name, UserModel.email)
            .outerjoin(UserModel, NotificationModel.user_id == UserModel.id)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [(self._to_entity(model), name, email) for model, name, email in query.all()]

    def count_all(self) -> int:
        return self.session.query(func.count(NotificationModel.id)).scalar() or 0

    @staticmethod
    def _to_row(notification: Notification) -> dict[str, object]:
        return {
            "id": notification.id,
            "user_id": notification.user_id,
            "title": notification.title,
            "message": notification.message,
            "type": NotificationType(notification.type).value,
            "link": notification.link,
            "is_read": notification.is_read,
            "created_at": ensure_app_naive_datetime(
                notification.created_at or now_in_app_timezone()
            ),
        }

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            message=model.message,
            type=NotificationType(model.type),
            link=model.link,
            is_read=bool(model.is_read),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]
