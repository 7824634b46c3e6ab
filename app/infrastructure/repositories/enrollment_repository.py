"""Persistence layer for course enrollments."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domain.entities import Enrollment
from app.infrastructure.database import classify_integrity_error
from app.infrastructure.models import EnrollmentModel
from app.utils import ensure_app_naive_datetime, ensure_app_timezone


class EnrollmentRepository:
    """Provide CRUD operations for :class:`Enrollment` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, enrollment: Enrollment) -> Enrollment:
        """Insert ``enrollment``.

        Raises :class:`~app.infrastructure.database.ConstraintViolationError`
        when the (user, course) pair already exists. Any other database error
        is re-raised as is.
        """

        model = EnrollmentModel(
            id=enrollment.id,
            user_id=enrollment.user_id,
            course_id=enrollment.course_id,
            progress_percent=enrollment.progress_percent,
            completed_at=ensure_app_naive_datetime(enrollment.completed_at),
        )
        if enrollment.enrolled_at is not None:
            model.enrolled_at = ensure_app_naive_datetime(enrollment.enrolled_at)
        self.session.add(model)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            violation = classify_integrity_error(exc)
            if violation is None:
                raise
            raise violation from exc
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(model)
        return self._to_entity(model)

    def get_by_user_and_course(self, user_id: str, course_id: str) -> Enrollment | None:
        model = (
            self.session.query(EnrollmentModel)
            .filter(EnrollmentModel.user_id == user_id)
            .filter(EnrollmentModel.course_id == course_id)
            .first()
        )
        return self._to_entity(model) if model else None

    def list_for_user(self, user_id: str) -> Sequence[Enrollment]:
        query = (
            self.session.query(EnrollmentModel)
            .filter(EnrollmentModel.user_id == user_id)
            .order_by(EnrollmentModel.enrolled_at.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: EnrollmentModel) -> Enrollment:
        return Enrollment(
            id=model.id,
            user_id=model.user_id,
            course_id=model.course_id,
            enrolled_at=ensure_app_timezone(model.enrolled_at),
            progress_percent=model.progress_percent or 0,
            completed_at=ensure_app_timezone(model.completed_at),
        )


__all__ = ["EnrollmentRepository"]
