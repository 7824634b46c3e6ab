"""Domain entity representing a course enrollment."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Enrollment:
    """Grants a user access to a course; unique per (user, course)."""

    id: str
    user_id: str
    course_id: str
    enrolled_at: datetime | None = None
    progress_percent: int = 0
    completed_at: datetime | None = None


__all__ = ["Enrollment"]
