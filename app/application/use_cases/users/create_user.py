"""Use case for creating users."""

from uuid import uuid4

from sqlalchemy.orm import Session

from app.domain.entities import User, UserRole
from app.infrastructure.repositories import UserRepository
from app.utils import now_in_app_timezone


def create_user(
    session: Session,
    *,
    email: str,
    name: str | None = None,
    role: UserRole | str = UserRole.STUDENT,
) -> User:
    """Create a new user ensuring unique email addresses."""

    repository = UserRepository(session)
    if repository.get_by_email(email):
        raise ValueError("Email is already registered")

    user = User(
        id=uuid4().hex,
        email=email,
        name=name,
        role=UserRole(role),
        created_at=now_in_app_timezone(),
    )
    return repository.create(user)
