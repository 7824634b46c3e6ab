"""Realtime notification helpers for the infrastructure layer."""

from .broadcaster import (
    CapacityExceededError,
    NotificationBroadcaster,
    get_notification_broadcaster,
    notification_broadcaster,
)
from .publisher import (
    NotificationPublisher,
    notification_publisher,
    serialize_notification,
)
from .stream import (
    SSE_HEADERS,
    SSE_MEDIA_TYPE,
    NotificationStream,
    StreamClosedError,
    format_sse,
)

__all__ = [
    "CapacityExceededError",
    "NotificationBroadcaster",
    "get_notification_broadcaster",
    "notification_broadcaster",
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
    "SSE_HEADERS",
    "SSE_MEDIA_TYPE",
    "NotificationStream",
    "StreamClosedError",
    "format_sse",
]
