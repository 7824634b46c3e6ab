"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class NotificationType(str, Enum):
    """Severity shown next to a notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: str
    user_id: str
    title: str
    message: str | None = None
    type: NotificationType = NotificationType.INFO
    link: str | None = None
    is_read: bool = False
    created_at: datetime | None = None


__all__ = ["Notification", "NotificationType"]
