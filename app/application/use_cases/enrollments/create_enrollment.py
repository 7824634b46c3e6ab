"""Insert-or-return-existing writer for course enrollments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import uuid4

from sqlalchemy.orm import Session

from app.domain.entities import Enrollment
from app.infrastructure.database import ConstraintViolationError
from app.infrastructure.repositories import EnrollmentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnrollmentResult:
    """Outcome of :func:`create_enrollment`."""

    created: bool
    enrollment: Enrollment


def create_enrollment(session: Session, *, user_id: str, course_id: str) -> EnrollmentResult:
    """Enroll ``user_id`` in ``course_id`` exactly once.

    No lock is taken: the unique (user, course) constraint decides which of
    two concurrent requests inserts the row, and the loser reads it back.
    Errors other than that duplicate propagate unchanged.
    """

    repository = EnrollmentRepository(session)
    candidate = Enrollment(id=uuid4().hex, user_id=user_id, course_id=course_id)
    try:
        enrollment = repository.create(candidate)
    except ConstraintViolationError:
        existing = repository.get_by_user_and_course(user_id, course_id)
        if existing is None:
            raise
        logger.info(
            "Enrollment for user %s in course %s already existed (%s)",
            user_id,
            course_id,
            existing.id,
        )
        return EnrollmentResult(created=False, enrollment=existing)
    return EnrollmentResult(created=True, enrollment=enrollment)


__all__ = ["EnrollmentResult", "create_enrollment"]
