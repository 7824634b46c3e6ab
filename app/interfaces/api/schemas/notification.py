"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import NotificationType


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    message: str | None = None
    type: NotificationType
    link: str | None = None
    is_read: bool
    created_at: datetime | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationRead]
    unread_count: int


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark notifications as read."""

    notification_ids: list[str] = Field(default_factory=list)
    mark_all: bool = False

    def unique_ids(self) -> list[str]:
        """Return the identifiers without duplicates preserving order."""

        return list(dict.fromkeys(self.notification_ids))


class NotificationMarkReadResponse(BaseModel):
    updated: int


class NotificationSendRequest(BaseModel):
    """Admin request to send a notification to a group of users."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=255)
    message: str | None = None
    type: NotificationType = NotificationType.INFO
    link: str | None = None
    target_user_ids: list[str] | None = None
    target_role: Literal["student", "instructor", "admin", "all"] | None = None


class NotificationSendResponse(BaseModel):
    message: str
    sent_count: int


class AdminNotificationRead(NotificationRead):
    user_name: str | None = None
    user_email: str | None = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class AdminNotificationPage(BaseModel):
    notifications: list[AdminNotificationRead]
    pagination: Pagination


class ConnectionStats(BaseModel):
    active_connections: int


__all__ = [
    "AdminNotificationPage",
    "AdminNotificationRead",
    "ConnectionStats",
    "NotificationListResponse",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "NotificationSendRequest",
    "NotificationSendResponse",
    "Pagination",
]
