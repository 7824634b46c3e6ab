"""Persistence layer for catalog courses."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy.orm import Session

from app.domain.entities import Course
from app.infrastructure.models import CourseModel
from app.utils import ensure_app_timezone


class CourseRepository:
    """Provide read and create helpers for :class:`Course` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, course_id: str) -> Course | None:
        model = self.session.get(CourseModel, course_id)
        return self._to_entity(model) if model else None

    def create(self, course: Course) -> Course:
        model = CourseModel(
            id=course.id,
            title=course.title,
            slug=course.slug,
            price=course.price,
            status=course.status,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: CourseModel) -> Course:
        return Course(
            id=model.id,
            title=model.title,
            slug=model.slug,
            price=Decimal(model.price or 0),
            status=model.status,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["CourseRepository"]
