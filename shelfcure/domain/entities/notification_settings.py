"""Domain entity describing which alerts a store wants generated."""

from dataclasses import dataclass
from datetime import datetime

from .notification import (
    NOTIFICATION_TYPE_EXPIRY_ALERT,
    NOTIFICATION_TYPE_LOW_STOCK,
    NOTIFICATION_TYPE_WHATSAPP,
)


@dataclass
class NotificationSettings:
    """Per-store toggles for the generated alert types."""

    id: int | None
    store_id: int
    low_stock: bool = True
    expiry_alerts: bool = True
    whatsapp: bool = True
    updated_at: datetime | None = None

    def is_enabled(self, notification_type: str) -> bool:
        """Return ``True`` unless ``notification_type`` was switched off."""

        toggles = {
            NOTIFICATION_TYPE_LOW_STOCK: self.low_stock,
            NOTIFICATION_TYPE_EXPIRY_ALERT: self.expiry_alerts,
            NOTIFICATION_TYPE_WHATSAPP: self.whatsapp,
        }
        return toggles.get(notification_type, True)


__all__ = ["NotificationSettings"]
