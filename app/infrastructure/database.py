"""Database configuration, session management and storage error mapping."""

from __future__ import annotations

import logging
import re
from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


settings = get_settings()

logger = logging.getLogger(__name__)

_DUPLICATE_KEY_MARKERS = (
    "duplicate entry",
    "er_dup_entry",
    "unique constraint",
    "duplicate key value",
    "unique violation",
)
_CONSTRAINT_NAME_PATTERNS = (
    re.compile(r"for key '(?:[^'.]+\.)?(?P<name>[^']+)'", re.IGNORECASE),
    re.compile(r'unique constraint "(?P<name>[^"]+)"', re.IGNORECASE),
    re.compile(r"unique constraint failed: (?P<name>[\w., ]+)", re.IGNORECASE),
)


class ConstraintViolationError(Exception):
    """Raised when an insert collides with a uniqueness constraint."""

    def __init__(self, constraint_name: str | None = None) -> None:
        self.constraint_name = constraint_name
        detail = constraint_name or "unknown"
        super().__init__(f"Unique constraint violated: {detail}")


def is_duplicate_key_error(error: BaseException | None) -> bool:
    """Return ``True`` when ``error`` reports a duplicate key.

    MySQL (``Duplicate entry``/``ER_DUP_ENTRY``), SQLite (``UNIQUE constraint
    failed``) and PostgreSQL (``duplicate key value``) messages are recognised.
    """

    if not isinstance(error, BaseException):
        return False
    text = str(getattr(error, "orig", None) or error).lower()
    return any(marker in text for marker in _DUPLICATE_KEY_MARKERS)


def classify_integrity_error(error: IntegrityError) -> ConstraintViolationError | None:
    """Translate ``error`` into a :class:`ConstraintViolationError` if possible."""

    if not is_duplicate_key_error(error):
        return None

    text = str(error.orig or error)
    for pattern in _CONSTRAINT_NAME_PATTERNS:
        match = pattern.search(text)
        if match:
            return ConstraintViolationError(match.group("name").strip())
    return ConstraintViolationError()


def _engine_options(database_url: str) -> dict[str, object]:
    if not database_url.startswith("sqlite"):
        return {"pool_pre_ping": True}

    # Worker threads and the event loop share SQLite connections.
    options: dict[str, object] = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in database_url or database_url.rstrip("/") == "sqlite:":
        options["poolclass"] = StaticPool
    return options


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def initialize_database() -> None:
    """Ensure all ORM models have corresponding database tables."""

    from app.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=engine, checkfirst=True)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


__all__ = [
    "Base",
    "ConstraintViolationError",
    "SessionLocal",
    "classify_integrity_error",
    "engine",
    "get_db",
    "initialize_database",
    "is_duplicate_key_error",
]
