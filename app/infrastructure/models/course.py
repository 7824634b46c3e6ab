"""SQLAlchemy model for the courses table."""

from sqlalchemy import Column, DateTime, Numeric, String

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class CourseModel(Base):
    """Database representation of a catalog course."""

    __tablename__ = "courses"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default="draft")
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


__all__ = ["CourseModel"]
