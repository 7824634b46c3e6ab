"""Use case for enrolling the current user in a catalog course."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.application.use_cases.notifications import notify
from app.domain.entities import Enrollment, NotificationType
from app.infrastructure.notifications import NotificationBroadcaster
from app.infrastructure.repositories import CourseRepository, EnrollmentRepository

from .create_enrollment import EnrollmentResult, create_enrollment


class CourseNotFoundError(ValueError):
    """Raised when the requested course does not exist or is not on sale."""


class PaymentRequiredError(ValueError):
    """Raised when a paid course is enrolled without a purchase."""


def enroll_in_course(
    session: Session,
    *,
    user_id: str,
    course_id: str,
    broadcaster: NotificationBroadcaster | None = None,
) -> EnrollmentResult:
    """Enroll ``user_id`` in a free published course.

    The learner is notified only when a new enrollment row was created.
    """

    course = CourseRepository(session).get(course_id)
    if course is None or not course.is_published:
        raise CourseNotFoundError("Course not found")
    if not course.is_free:
        raise PaymentRequiredError("Payment required for this course")

    result = create_enrollment(session, user_id=user_id, course_id=course_id)
    if result.created:
        notify(
            session,
            user_id=user_id,
            title="Enrollment confirmed",
            message=f"You now have access to '{course.title}'.",
            type=NotificationType.SUCCESS,
            link=f"/courses/{course.slug}",
            broadcaster=broadcaster,
        )
    return result


def get_enrollment(session: Session, *, user_id: str, course_id: str) -> Enrollment | None:
    """Return the enrollment of ``user_id`` in ``course_id`` if it exists."""

    return EnrollmentRepository(session).get_by_user_and_course(user_id, course_id)


__all__ = [
    "CourseNotFoundError",
    "PaymentRequiredError",
    "enroll_in_course",
    "get_enrollment",
]
