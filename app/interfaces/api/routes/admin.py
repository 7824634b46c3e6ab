"""Administrative endpoints for broadcasting and auditing notifications."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import list_all_notifications, notify
from app.domain.entities import User
from app.infrastructure.database import get_db
from app.infrastructure.notifications import (
    NotificationBroadcaster,
    get_notification_broadcaster,
)
from app.interfaces.api.dependencies import require_admin
from app.interfaces.api.schemas import (
    AdminNotificationPage,
    AdminNotificationRead,
    ConnectionStats,
    NotificationRead,
    NotificationSendRequest,
    NotificationSendResponse,
    Pagination,
)

router = APIRouter(prefix="/admin/notifications", tags=["admin"])
logger = logging.getLogger(__name__)


@router.post("/", response_model=NotificationSendResponse)
def send_notification(
    payload: NotificationSendRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
    broadcaster: NotificationBroadcaster = Depends(get_notification_broadcaster),
) -> NotificationSendResponse:
    """Send a notification to explicit users, a role, or everyone."""

    audience: dict[str, object]
    if payload.target_user_ids:
        audience = {"user_ids": payload.target_user_ids}
    elif payload.target_role:
        audience = {"target_role": payload.target_role}
    else:
        audience = {"all_users": True}

    sent = notify(
        db,
        title=payload.title,
        message=payload.message,
        type=payload.type,
        link=payload.link,
        broadcaster=broadcaster,
        **audience,
    )
    if not sent:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No target users found",
        )

    logger.info("Admin %s sent notification to %s user(s)", current_user.id, len(sent))
    return NotificationSendResponse(
        message=f"Notification sent to {len(sent)} user(s)",
        sent_count=len(sent),
    )


@router.get("/", response_model=AdminNotificationPage)
def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> AdminNotificationPage:
    """Return notifications of all users, newest first."""

    result = list_all_notifications(db, page=page, limit=limit)
    return AdminNotificationPage(
        notifications=[
            AdminNotificationRead(
                **NotificationRead.model_validate(notification).model_dump(),
                user_name=user_name,
                user_email=user_email,
            )
            for notification, user_name, user_email in result.entries
        ],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            total_pages=result.total_pages,
        ),
    )


@router.get("/connections", response_model=ConnectionStats)
def read_connection_stats(
    _: User = Depends(require_admin),
    broadcaster: NotificationBroadcaster = Depends(get_notification_broadcaster),
) -> ConnectionStats:
    """Return the number of live notification streams in this process."""

    return ConnectionStats(active_connections=broadcaster.active_connection_count())
