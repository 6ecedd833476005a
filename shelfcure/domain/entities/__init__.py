"""Domain entities exposed by the application."""

from .medicine import Batch, Medicine
from .notification import (
    NOTIFICATION_PRIORITIES,
    NOTIFICATION_TYPE_EXPIRY_ALERT,
    NOTIFICATION_TYPE_LOW_STOCK,
    NOTIFICATION_TYPE_WHATSAPP,
    NOTIFICATION_TYPES,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    Notification,
    NotificationCandidate,
    build_dedupe_key,
)
from .notification_settings import NotificationSettings
from .store import Store
from .user import ROLE_ADMIN, ROLE_STORE_MANAGER, ROLE_STORE_OWNER, User
from .whatsapp_message import (
    WHATSAPP_STATUS_FAILED,
    WHATSAPP_STATUS_PENDING,
    WHATSAPP_STATUS_SENT,
    WhatsAppMessage,
)

__all__ = [
    "Batch",
    "Medicine",
    "Notification",
    "NotificationCandidate",
    "NotificationSettings",
    "NOTIFICATION_TYPES",
    "NOTIFICATION_TYPE_LOW_STOCK",
    "NOTIFICATION_TYPE_EXPIRY_ALERT",
    "NOTIFICATION_TYPE_WHATSAPP",
    "NOTIFICATION_PRIORITIES",
    "PRIORITY_LOW",
    "PRIORITY_MEDIUM",
    "PRIORITY_HIGH",
    "build_dedupe_key",
    "Store",
    "User",
    "ROLE_ADMIN",
    "ROLE_STORE_OWNER",
    "ROLE_STORE_MANAGER",
    "WhatsAppMessage",
    "WHATSAPP_STATUS_PENDING",
    "WHATSAPP_STATUS_SENT",
    "WHATSAPP_STATUS_FAILED",
]
