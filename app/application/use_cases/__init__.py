"""Aggregate application use cases."""

from .enrollments import create_enrollment, enroll_in_course
from .notifications import notify
from .users import create_user

__all__ = [
    "create_enrollment",
    "create_user",
    "enroll_in_course",
    "notify",
]
