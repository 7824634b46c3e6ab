"""Use cases for course enrollments."""

from .create_enrollment import EnrollmentResult, create_enrollment
from .enroll_in_course import (
    CourseNotFoundError,
    PaymentRequiredError,
    enroll_in_course,
    get_enrollment,
)

__all__ = [
    "CourseNotFoundError",
    "EnrollmentResult",
    "PaymentRequiredError",
    "create_enrollment",
    "enroll_in_course",
    "get_enrollment",
]
