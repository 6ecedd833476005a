"""Use cases for managing users."""

from .authenticate_user import AuthenticationStatus, authenticate_user
from .create_user import create_store, create_user

__all__ = [
    "AuthenticationStatus",
    "authenticate_user",
    "create_store",
    "create_user",
]
