"""Use cases for reading and acknowledging stored notifications."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import Notification
from app.infrastructure.repositories import NotificationRepository

_MAX_PAGE_SIZE = 100


@dataclass
class NotificationPage:
    """One page of the admin notification log."""

    entries: list[tuple[Notification, str | None, str | None]] = field(default_factory=list)
    page: int = 1
    limit: int = 50
    total: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def _clamp(value: int, *, low: int, high: int) -> int:
    return max(low, min(high, value))


def list_user_notifications(
    session: Session,
    *,
    user_id: str,
    limit: int = 20,
    unread_only: bool = False,
) -> tuple[Sequence[Notification], int]:
    """Return the latest notifications of ``user_id`` and the unread count."""

    repository = NotificationRepository(session)
    notifications = repository.list_for_user(
        user_id,
        limit=_clamp(limit, low=1, high=_MAX_PAGE_SIZE),
        unread_only=unread_only,
    )
    return notifications, repository.count_unread(user_id)


def mark_notifications_read(
    session: Session,
    *,
    user_id: str,
    notification_ids: Sequence[str] | None = None,
    mark_all: bool = False,
) -> int:
    """Flag notifications of ``user_id`` as read and return how many changed."""

    repository = NotificationRepository(session)
    if mark_all:
        return repository.mark_all_as_read(user_id=user_id)
    return repository.mark_as_read(notification_ids or [], user_id=user_id)


def list_all_notifications(
    session: Session, *, page: int = 1, limit: int = 50
) -> NotificationPage:
    """Return a page of notifications across all users, newest first."""

    page = max(1, page)
    limit = _clamp(limit, low=1, high=_MAX_PAGE_SIZE)
    repository = NotificationRepository(session)
    return NotificationPage(
        entries=repository.list_all(offset=(page - 1) * limit, limit=limit),
        page=page,
        limit=limit,
        total=repository.count_all(),
    )


__all__ = [
    "NotificationPage",
    "list_all_notifications",
    "list_user_notifications",
    "mark_notifications_read",
]
