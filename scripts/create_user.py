"""Utility script to create a user and print an access token for it."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from app.application.use_cases.users import create_user
from app.domain.entities import UserRole
from app.infrastructure.database import SessionLocal, initialize_database
from app.infrastructure.security import create_user_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Create a platform user and print a bearer token for local testing.",
    )
    parser.add_argument("--email", required=True, help="Email address of the user")
    parser.add_argument("--name", default=None, help="Display name (optional)")
    parser.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        default=UserRole.STUDENT.value,
        help="Role assigned to the user (default: student)",
    )
    return parser.parse_args()


def main() -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        user = create_user(session, email=args.email, name=args.name, role=args.role)
    except ValueError as exc:
        session.rollback()
        raise SystemExit(f"Could not create the user: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Database error while saving the user: {exc}") from exc
    else:
        print(
            "User created:\n"
            f"  ID: {user.id}\n"
            f"  Email: {user.email}\n"
            f"  Role: {user.role.value}\n"
            f"  Token: {create_user_token(user.id)}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
