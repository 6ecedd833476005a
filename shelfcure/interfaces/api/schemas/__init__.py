from .auth import Token
from .notification import (
    GenerateNotificationsResponse,
    GenerationResultRead,
    MarkReadResultRead,
    NotificationCreate,
    NotificationListResponse,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
    NotificationResponse,
    NotificationSettingsRead,
    NotificationSettingsResponse,
    NotificationSettingsUpdate,
    PaginationRead,
    UnreadCountRead,
    UnreadCountResponse,
)

__all__ = [
    "GenerateNotificationsResponse",
    "GenerationResultRead",
    "MarkReadResultRead",
    "NotificationCreate",
    "NotificationListResponse",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "NotificationResponse",
    "NotificationSettingsRead",
    "NotificationSettingsResponse",
    "NotificationSettingsUpdate",
    "PaginationRead",
    "Token",
    "UnreadCountRead",
    "UnreadCountResponse",
]
