"""SQLAlchemy model for course enrollments."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime

ENROLLMENT_UNIQUE_CONSTRAINT = "uq_enrollment_user_course"


class EnrollmentModel(Base):
    """Database representation of a user's access to a course."""

    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name=ENROLLMENT_UNIQUE_CONSTRAINT),
    )

    id = Column(String(36), primary_key=True)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_id = Column(
        String(36), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    enrolled_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    progress_percent = Column(Integer, nullable=False, default=0)
    completed_at = Column(DateTime, nullable=True)


__all__ = ["ENROLLMENT_UNIQUE_CONSTRAINT", "EnrollmentModel"]
