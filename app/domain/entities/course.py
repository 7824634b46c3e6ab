"""Domain entity representing a course in the catalog."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

COURSE_STATUS_DRAFT = "draft"
COURSE_STATUS_PUBLISHED = "published"
COURSE_STATUS_ARCHIVED = "archived"


@dataclass
class Course:
    """Sellable course listed in the catalog."""

    id: str
    title: str
    slug: str
    price: Decimal
    status: str = COURSE_STATUS_DRAFT
    created_at: datetime | None = None

    @property
    def is_free(self) -> bool:
        return self.price <= 0

    @property
    def is_published(self) -> bool:
        return self.status == COURSE_STATUS_PUBLISHED


__all__ = [
    "COURSE_STATUS_ARCHIVED",
    "COURSE_STATUS_DRAFT",
    "COURSE_STATUS_PUBLISHED",
    "Course",
]
