"""Public helpers for emitting and reading user notifications."""

from .dispatch import TARGET_ROLE_ALL, notify, resolve_recipients
from .inbox import (
    NotificationPage,
    list_all_notifications,
    list_user_notifications,
    mark_notifications_read,
)

__all__ = [
    "TARGET_ROLE_ALL",
    "notify",
    "resolve_recipients",
    "NotificationPage",
    "list_all_notifications",
    "list_user_notifications",
    "mark_notifications_read",
]
