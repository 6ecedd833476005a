"""Repository implementations for infrastructure layer."""

from .inventory_repository import InventoryRepository
from .notification_repository import NotificationRepository
from .notification_settings_repository import NotificationSettingsRepository
from .store_repository import StoreRepository
from .user_repository import UserRepository
from .whatsapp_message_repository import WhatsAppMessageRepository

__all__ = [
    "InventoryRepository",
    "NotificationRepository",
    "NotificationSettingsRepository",
    "StoreRepository",
    "UserRepository",
    "WhatsAppMessageRepository",
]
