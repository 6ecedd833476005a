"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    store_id: int
    type: str
    priority: str
    title: str
    message: str
    is_read: bool
    related_entity: str | None = None
    action_required: bool = False
    action_url: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    time_ago: str


class PaginationRead(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int


class NotificationListResponse(BaseModel):
    success: bool = True
    data: list[NotificationRead]
    pagination: PaginationRead


class NotificationResponse(BaseModel):
    success: bool = True
    data: NotificationRead


class NotificationCreate(BaseModel):
    """Payload used by other subsystems to raise a notification."""

    type: str
    title: str = Field(..., max_length=120)
    message: str
    priority: str = "medium"
    related_entity: str | None = Field(default=None, max_length=120)
    action_required: bool = False
    action_url: str | None = Field(default=None, max_length=255)
    metadata: dict[str, Any] = Field(default_factory=dict)


class GenerationResultRead(BaseModel):
    """Counters reported by a generation run."""

    generated: int
    duplicates: int
    errors: list[str] = Field(default_factory=list)


class GenerateNotificationsResponse(BaseModel):
    success: bool
    message: str
    data: GenerationResultRead


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[int] = Field(default_factory=list, description="Notification identifiers")


class MarkReadResultRead(BaseModel):
    updated: int


class NotificationMarkReadResponse(BaseModel):
    success: bool = True
    message: str
    data: MarkReadResultRead


class UnreadCountRead(BaseModel):
    count: int


class UnreadCountResponse(BaseModel):
    success: bool = True
    data: UnreadCountRead


class NotificationSettingsRead(BaseModel):
    store_id: int
    low_stock: bool
    expiry_alerts: bool
    whatsapp: bool
    updated_at: datetime | None = None


class NotificationSettingsUpdate(BaseModel):
    """Toggles to change; omitted fields keep their current value."""

    low_stock: bool | None = None
    expiry_alerts: bool | None = None
    whatsapp: bool | None = None


class NotificationSettingsResponse(BaseModel):
    success: bool = True
    data: NotificationSettingsRead


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
    "UnreadCountRead",
    "UnreadCountResponse",
]
