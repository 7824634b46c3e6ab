"""Create notifications for an audience and push them to live streams."""

from __future__ import annotations

import logging
from typing import Sequence
from uuid import uuid4

from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.entities import Notification, NotificationType, UserRole
from app.infrastructure.notifications import (
    NotificationBroadcaster,
    NotificationPublisher,
    notification_publisher,
)
from app.infrastructure.repositories import NotificationRepository, UserRepository
from app.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

TARGET_ROLE_ALL = "all"


def resolve_recipients(
    session: Session,
    *,
    user_id: str | None = None,
    user_ids: Sequence[str] | None = None,
    all_users: bool = False,
    target_role: UserRole | str | None = None,
) -> list[str]:
    """Return the user ids selected by the first populated audience selector.

    Precedence is ``user_id``, then a non-empty ``user_ids``, then
    ``all_users``/``target_role``. Explicit lists are returned as given.
    """

    if user_id:
        return [user_id]
    if user_ids:
        return list(user_ids)
    if all_users or target_role:
        role = None
        if target_role and target_role != TARGET_ROLE_ALL:
            role = UserRole(target_role)
        return UserRepository(session).list_ids(role=role)
    return []


def notify(
    session: Session,
    *,
    title: str,
    message: str | None = None,
    type: NotificationType | str = NotificationType.INFO,
    link: str | None = None,
    user_id: str | None = None,
    user_ids: Sequence[str] | None = None,
    all_users: bool = False,
    target_role: UserRole | str | None = None,
    broadcaster: NotificationBroadcaster | None = None,
    batch_size: int | None = None,
) -> list[Notification]:
    """Persist one notification per recipient and publish each one live.

    Recipients are written in batches of ``batch_size``; every batch is
    committed before any of its rows is published. A failing batch aborts
    the remaining ones and the error reaches the caller, while batches
    already committed stay delivered.
    """

    recipients = resolve_recipients(
        session,
        user_id=user_id,
        user_ids=user_ids,
        all_users=all_users,
        target_role=target_role,
    )
    if not recipients:
        return []

    size = batch_size if batch_size is not None else get_settings().notification_batch_size
    if size < 1:
        raise ValueError("batch_size must be positive")

    notification_type = NotificationType(type)
    publisher = (
        NotificationPublisher(broadcaster) if broadcaster is not None else notification_publisher
    )
    repository = NotificationRepository(session)
    created_at = now_in_app_timezone()

    logger.info(
        "Dispatching notification %r to %s recipient(s) in batches of %s",
        title,
        len(recipients),
        size,
    )

    sent: list[Notification] = []
    for start in range(0, len(recipients), size):
        batch = [
            Notification(
                id=uuid4().hex,
                user_id=recipient_id,
                title=title,
                message=message or None,
                type=notification_type,
                link=link or None,
                is_read=False,
                created_at=created_at,
            )
            for recipient_id in recipients[start : start + size]
        ]
        saved = repository.create_many(batch)
        publisher.dispatch_many(saved)
        sent.extend(saved)
    return sent


__all__ = ["TARGET_ROLE_ALL", "notify", "resolve_recipients"]
