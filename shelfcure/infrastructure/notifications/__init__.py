"""Realtime notification helpers for the infrastructure layer."""

from .manager import StoreChannelManager, notification_manager
from .publisher import (
    NEW_NOTIFICATION_EVENT,
    NotificationPublisher,
    dispatch_notification,
    notification_publisher,
    serialize_notification,
)

__all__ = [
    "StoreChannelManager",
    "notification_manager",
    "NEW_NOTIFICATION_EVENT",
    "NotificationPublisher",
    "notification_publisher",
    "dispatch_notification",
    "serialize_notification",
]
