"""Domain entity representing a store notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NOTIFICATION_TYPE_LOW_STOCK = "low_stock"
NOTIFICATION_TYPE_EXPIRY_ALERT = "expiry_alert"
NOTIFICATION_TYPE_WHATSAPP = "whatsapp"

NOTIFICATION_TYPES = (
    NOTIFICATION_TYPE_LOW_STOCK,
    NOTIFICATION_TYPE_EXPIRY_ALERT,
    NOTIFICATION_TYPE_WHATSAPP,
    "payment_reminder",
    "customer_message",
    "system",
)

PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"

# Ordered from least to most severe.
NOTIFICATION_PRIORITIES = (PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH)


def build_dedupe_key(store_id: int, type: str, related_entity: str | None) -> str:
    """Return the key identifying one alert condition inside a store."""

    return f"{store_id}:{type}:{related_entity or ''}"


@dataclass(frozen=True)
class NotificationCandidate:
    """Alert produced by a scanner before deduplication and persistence."""

    type: str
    title: str
    message: str
    priority: str
    related_entity: str | None = None
    action_required: bool = True
    action_url: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class Notification:
    """Alert delivered to the members of a specific store."""

    id: int | None
    store_id: int
    type: str
    title: str
    message: str
    priority: str
    is_read: bool = False
    related_entity: str | None = None
    action_required: bool = False
    action_url: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None

    @property
    def dedupe_key(self) -> str:
        return build_dedupe_key(self.store_id, self.type, self.related_entity)

    @classmethod
    def from_candidate(
        cls,
        candidate: NotificationCandidate,
        *,
        store_id: int,
        created_at: datetime | None = None,
    ) -> "Notification":
        return cls(
            id=None,
            store_id=store_id,
            type=candidate.type,
            title=candidate.title,
            message=candidate.message,
            priority=candidate.priority,
            is_read=False,
            related_entity=candidate.related_entity,
            action_required=candidate.action_required,
            action_url=candidate.action_url,
            metadata=dict(candidate.metadata),
            created_at=created_at,
        )


__all__ = [
    "NOTIFICATION_TYPE_LOW_STOCK",
    "NOTIFICATION_TYPE_EXPIRY_ALERT",
    "NOTIFICATION_TYPE_WHATSAPP",
    "NOTIFICATION_TYPES",
    "PRIORITY_LOW",
    "PRIORITY_MEDIUM",
    "PRIORITY_HIGH",
    "NOTIFICATION_PRIORITIES",
    "Notification",
    "NotificationCandidate",
    "build_dedupe_key",
]
