"""Use cases for managing users."""

from .create_user import create_user

__all__ = ["create_user"]
