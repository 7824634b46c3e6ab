"""Utility helpers to push persisted notifications to live subscribers."""

from __future__ import annotations

from typing import Iterable

from app.domain.entities import Notification, NotificationType

from .broadcaster import (
    NotificationBroadcaster,
    NotificationPayload,
    notification_broadcaster,
)


class NotificationPublisher:
    """Serialize notifications and hand them to the broadcaster."""

    def __init__(self, broadcaster: NotificationBroadcaster) -> None:
        self._broadcaster = broadcaster

    def dispatch(self, notification: Notification) -> int:
        """Deliver ``notification`` to its recipient's live streams."""

        return self._broadcaster.publish(
            notification.user_id, self._serialize(notification)
        )

    def dispatch_many(self, notifications: Iterable[Notification]) -> int:
        return sum(self.dispatch(notification) for notification in notifications)

    @staticmethod
    def _serialize(notification: Notification) -> NotificationPayload:
        return {
            "id": notification.id,
            "title": notification.title,
            "message": notification.message,
            "type": NotificationType(notification.type).value,
            "link": notification.link,
            "createdAt": notification.created_at.isoformat()
            if notification.created_at
            else None,
        }


notification_publisher = NotificationPublisher(notification_broadcaster)


def serialize_notification(notification: Notification) -> NotificationPayload:
    """Return the live-stream payload representation for ``notification``."""

    return NotificationPublisher._serialize(notification)


__all__ = [
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
]
