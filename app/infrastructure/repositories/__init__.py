"""Repository implementations for infrastructure layer."""

from .course_repository import CourseRepository
from .enrollment_repository import EnrollmentRepository
from .notification_repository import NotificationRepository
from .user_repository import UserRepository

__all__ = [
    "CourseRepository",
    "EnrollmentRepository",
    "NotificationRepository",
    "UserRepository",
]
