"""Persistence layer for user data."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.entities import User, UserRole
from app.infrastructure.models import UserModel
from app.utils import ensure_app_naive_datetime, ensure_app_timezone


class UserRepository:
    """Provide lookups over user accounts."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = self.session.query(UserModel).filter(UserModel.email == email).first()
        return self._to_entity(model) if model else None

    def list_ids(self, *, role: UserRole | str | None = None) -> list[str]:
        """Return every user id, optionally restricted to ``role``."""

        query = self.session.query(UserModel.id)
        if role is not None:
            query = query.filter(UserModel.role == UserRole(role).value)
        return [user_id for (user_id,) in query.order_by(UserModel.created_at, UserModel.id)]

    def create(self, user: User) -> User:
        model = UserModel(
            id=user.id,
            email=user.email,
            name=user.name,
            role=UserRole(user.role).value,
        )
        if user.created_at is not None:
            model.created_at = ensure_app_naive_datetime(user.created_at)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            name=model.name,
            role=UserRole(model.role),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["UserRepository"]
