from .enrollment import EnrollmentCheck, EnrollmentCreate, EnrollmentRead
from .notification import (
    AdminNotificationPage,
    AdminNotificationRead,
    ConnectionStats,
    NotificationListResponse,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
    NotificationSendRequest,
    NotificationSendResponse,
    Pagination,
)

__all__ = [
    "AdminNotificationPage",
    "AdminNotificationRead",
    "ConnectionStats",
    "EnrollmentCheck",
    "EnrollmentCreate",
    "EnrollmentRead",
    "NotificationListResponse",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "NotificationSendRequest",
    "NotificationSendResponse",
    "Pagination",
]
