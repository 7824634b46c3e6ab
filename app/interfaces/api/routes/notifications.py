"""Endpoints and event stream for user notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.application.use_cases.notifications import (
    list_user_notifications,
    mark_notifications_read,
)
from app.config import get_settings
from app.domain.entities import User
from app.infrastructure import database
from app.infrastructure.database import get_db
from app.infrastructure.notifications import (
    SSE_HEADERS,
    SSE_MEDIA_TYPE,
    NotificationBroadcaster,
    NotificationStream,
    get_notification_broadcaster,
)
from app.interfaces.api.dependencies import (
    get_current_user,
    get_stream_token,
    resolve_current_user,
)
from app.interfaces.api.schemas import (
    NotificationListResponse,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationListResponse)
def list_notifications(
    limit: int = Query(20, description="Maximum notifications returned (1-100)"),
    unread_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationListResponse:
    """Return the most recent notifications for the authenticated user."""

    notifications, unread_count = list_user_notifications(
        db, user_id=current_user.id, limit=limit, unread_only=unread_only
    )
    return NotificationListResponse(
        notifications=[NotificationRead.model_validate(n) for n in notifications],
        unread_count=unread_count,
    )


@router.put("/", response_model=NotificationMarkReadResponse)
def mark_notifications(
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationMarkReadResponse:
    """Mark the given notifications (or all of them) as read."""

    updated = mark_notifications_read(
        db,
        user_id=current_user.id,
        notification_ids=payload.unique_ids(),
        mark_all=payload.mark_all,
    )
    return NotificationMarkReadResponse(updated=updated)


def _resolve_stream_user(token: str | None) -> User:
    session = database.SessionLocal()
    try:
        return resolve_current_user(token, session)
    finally:
        session.close()


@router.get("/stream")
async def stream_notifications(
    token: str | None = Depends(get_stream_token),
    broadcaster: NotificationBroadcaster = Depends(get_notification_broadcaster),
) -> StreamingResponse:
    """Server-sent event stream of live notifications for the caller."""

    # The identity is resolved before anything is subscribed.
    user = await run_in_threadpool(_resolve_stream_user, token)

    stream = NotificationStream(
        user.id,
        broadcaster,
        heartbeat_interval=get_settings().notification_heartbeat_seconds,
    )
    return StreamingResponse(
        stream.events(), media_type=SSE_MEDIA_TYPE, headers=SSE_HEADERS
    )
