"""Notification pipeline use cases."""

from .create import create_notification
from .generate import GenerationSummary, generate_for_active_stores, generate_notifications
from .queries import (
    NotificationPage,
    count_unread,
    list_notifications,
    mark_notification_read,
    mark_notifications_read,
)
from .scanners import (
    DEFAULT_SCANNERS,
    scan_expiring_batches,
    scan_low_stock,
    scan_whatsapp_queue,
)
from .settings import get_notification_settings, update_notification_settings

__all__ = [
    "DEFAULT_SCANNERS",
    "GenerationSummary",
    "NotificationPage",
    "count_unread",
    "create_notification",
    "generate_for_active_stores",
    "generate_notifications",
    "get_notification_settings",
    "list_notifications",
    "mark_notification_read",
    "mark_notifications_read",
    "scan_expiring_batches",
    "scan_low_stock",
    "scan_whatsapp_queue",
    "update_notification_settings",
]
