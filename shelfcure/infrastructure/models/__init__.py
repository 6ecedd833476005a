"""ORM models used by the application infrastructure."""

from .store import StoreModel
from .user import UserModel
from .medicine import BatchModel, MedicineModel
from .whatsapp_message import WhatsAppMessageModel
from .notification import NotificationModel
from .notification_settings import NotificationSettingsModel

__all__ = [
    "StoreModel",
    "UserModel",
    "MedicineModel",
    "BatchModel",
    "WhatsAppMessageModel",
    "NotificationModel",
    "NotificationSettingsModel",
]
