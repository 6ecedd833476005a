"""Aggregate application use cases."""

from .notifications import generate_notifications, list_notifications, mark_notification_read
from .users import authenticate_user, create_store, create_user

__all__ = [
    "authenticate_user",
    "create_store",
    "create_user",
    "generate_notifications",
    "list_notifications",
    "mark_notification_read",
]
