"""Schemas for enrollment endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class EnrollmentCreate(BaseModel):
    course_id: str = Field(..., min_length=1, max_length=36)


class EnrollmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    course_id: str
    enrolled_at: datetime | None = None
    progress_percent: int = 0
    completed_at: datetime | None = None


class EnrollmentCheck(BaseModel):
    enrolled: bool
    enrollment_id: str | None = None


__all__ = ["EnrollmentCheck", "EnrollmentCreate", "EnrollmentRead"]
