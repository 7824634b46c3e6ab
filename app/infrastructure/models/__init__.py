"""ORM models used by the application infrastructure."""

from .course import CourseModel
from .enrollment import ENROLLMENT_UNIQUE_CONSTRAINT, EnrollmentModel
from .notification import NotificationModel
from .user import UserModel

__all__ = [
    "CourseModel",
    "ENROLLMENT_UNIQUE_CONSTRAINT",
    "EnrollmentModel",
    "NotificationModel",
    "UserModel",
]
