"""Domain entities exposed by the application."""

from .course import (
    COURSE_STATUS_ARCHIVED,
    COURSE_STATUS_DRAFT,
    COURSE_STATUS_PUBLISHED,
    Course,
)
from .enrollment import Enrollment
from .notification import Notification, NotificationType
from .user import User, UserRole

__all__ = [
    "COURSE_STATUS_ARCHIVED",
    "COURSE_STATUS_DRAFT",
    "COURSE_STATUS_PUBLISHED",
    "Course",
    "Enrollment",
    "Notification",
    "NotificationType",
    "User",
    "UserRole",
]
