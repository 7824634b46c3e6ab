"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    """Roles a platform account can hold."""

    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


@dataclass
class User:
    """Core attributes describing a platform user."""

    id: str
    email: str
    name: str | None
    role: UserRole
    created_at: datetime | None = None

    def has_role(self, role: UserRole | str) -> bool:
        """Return ``True`` when the user's role matches ``role``."""

        return self.role.value == UserRole(role).value

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.has_role(UserRole.ADMIN)


__all__ = ["User", "UserRole"]
