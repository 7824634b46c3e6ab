"""Shared fixtures: a throwaway SQLite database, users, courses and a client."""

from __future__ import annotations

import os
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

import pytest

TEST_DB_PATH = Path(__file__).parent / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["APP_TIMEZONE"] = "UTC"

from app.application.use_cases.users import create_user  # noqa: E402
from app.domain.entities import Course, User, UserRole  # noqa: E402
from app.infrastructure import database  # noqa: E402
from app.infrastructure.notifications import (  # noqa: E402
    NotificationBroadcaster,
    get_notification_broadcaster,
)
from app.infrastructure.repositories import CourseRepository  # noqa: E402
from app.infrastructure.security import create_user_token  # noqa: E402


@pytest.fixture(autouse=True)
def setup_database():
    """Recreate every table for each test."""

    from app.infrastructure import models  # noqa: F401

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.Base.metadata.create_all(bind=database.engine)
    yield
    database.engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture()
def db_session():
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def broadcaster() -> NotificationBroadcaster:
    return NotificationBroadcaster(max_connections_per_user=3, max_total_connections=500)


@pytest.fixture()
def make_user(db_session):
    """Return a factory creating users with the requested role."""

    def _make_user(role: UserRole | str = UserRole.STUDENT, email: str | None = None) -> User:
        return create_user(
            db_session,
            email=email or f"{uuid4().hex[:12]}@example.com",
            name="Test User",
            role=role,
        )

    return _make_user


@pytest.fixture()
def make_course(db_session):
    def _make_course(*, price: str = "0", status: str = "published") -> Course:
        slug = f"course-{uuid4().hex[:8]}"
        return CourseRepository(db_session).create(
            Course(
                id=uuid4().hex,
                title=f"Course {slug}",
                slug=slug,
                price=Decimal(price),
                status=status,
            )
        )

    return _make_course


@pytest.fixture()
def auth_headers():
    """Return a helper building bearer headers for a user."""

    def _auth_headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_user_token(user.id)}"}

    return _auth_headers


@pytest.fixture()
def client(broadcaster):
    """Return a test client whose routes share the ``broadcaster`` fixture."""

    from fastapi.testclient import TestClient

    from main import create_app

    app = create_app()
    app.dependency_overrides[get_notification_broadcaster] = lambda: broadcaster
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
