"""Condition scanners turning store state into notification candidates.

Each scanner is a generator ``scan(session, store_id, *, settings, now)``
that only reads. Scanners keep no state between calls, so every generation
run re-evaluates the current inventory and message queue.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta
from urllib.parse import quote

from sqlalchemy.orm import Session

from shelfcure.config import Settings
from shelfcure.domain.entities import (
    NOTIFICATION_TYPE_EXPIRY_ALERT,
    NOTIFICATION_TYPE_LOW_STOCK,
    NOTIFICATION_TYPE_WHATSAPP,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    WHATSAPP_STATUS_FAILED,
    NotificationCandidate,
)
from shelfcure.infrastructure.repositories import (
    InventoryRepository,
    WhatsAppMessageRepository,
)
from shelfcure.utils import ensure_app_timezone

Scanner = Callable[..., Iterator[NotificationCandidate]]

_ONE_DAY_SECONDS = 24 * 60 * 60


def scan_low_stock(
    session: Session, store_id: int, *, settings: Settings, now: datetime
) -> Iterator[NotificationCandidate]:
    """Yield an alert for every medicine at or below its minimum stock."""

    for medicine in InventoryRepository(session).list_low_stock_medicines(store_id):
        stock, threshold, unit = medicine.stock_level()
        yield NotificationCandidate(
            type=NOTIFICATION_TYPE_LOW_STOCK,
            title="Low Stock Alert",
            message=(
                f"{medicine.name} is running low "
                f"({stock} {unit} remaining, threshold: {threshold})"
            ),
            priority=PRIORITY_HIGH if stock == 0 else PRIORITY_MEDIUM,
            related_entity=f"medicine:{medicine.id}",
            action_url=f"/store-panel/inventory?search={quote(medicine.name)}",
            metadata={
                "medicine_id": medicine.id,
                "medicine_name": medicine.name,
                "current_stock": stock,
                "threshold": threshold,
                "unit": unit,
            },
        )


def expiry_priority(days_to_expiry: int, settings: Settings) -> str:
    """Map the remaining shelf life onto an alert priority."""

    if days_to_expiry <= settings.expiry_critical_days:
        return PRIORITY_HIGH
    if days_to_expiry <= settings.expiry_soon_days:
        return PRIORITY_MEDIUM
    return PRIORITY_LOW


def days_until(expiry_date: datetime, now: datetime) -> int:
    """Whole days left before ``expiry_date``, rounded up."""

    remaining = ensure_app_timezone(expiry_date) - ensure_app_timezone(now)
    return math.ceil(remaining.total_seconds() / _ONE_DAY_SECONDS)


def scan_expiring_batches(
    session: Session, store_id: int, *, settings: Settings, now: datetime
) -> Iterator[NotificationCandidate]:
    """Yield an alert for every stocked batch expiring inside the warning window."""

    window_end = now + timedelta(days=settings.expiry_warning_days)
    batches = InventoryRepository(session).list_expiring_batches(
        store_id, start=now, end=window_end
    )
    for batch, medicine in batches:
        days = days_until(batch.expiry_date, now)
        yield NotificationCandidate(
            type=NOTIFICATION_TYPE_EXPIRY_ALERT,
            title="Medicine Expiry Alert",
            message=(
                f"{medicine.name} (batch {batch.batch_number}) expires in "
                f"{days} day{'s' if days != 1 else ''}"
            ),
            priority=expiry_priority(days, settings),
            related_entity=f"batch:{batch.id}",
            action_url=f"/store-panel/expiry-alerts?search={quote(medicine.name)}",
            metadata={
                "medicine_id": medicine.id,
                "medicine_name": medicine.name,
                "batch_id": batch.id,
                "batch_number": batch.batch_number,
                "expiry_date": ensure_app_timezone(batch.expiry_date).isoformat(),
                "days_to_expiry": days,
                "quantity": batch.total_stock,
            },
        )


def scan_whatsapp_queue(
    session: Session, store_id: int, *, settings: Settings, now: datetime
) -> Iterator[NotificationCandidate]:
    """Yield alerts for failed or stuck outbound WhatsApp messages."""

    pending_before = now - timedelta(minutes=settings.whatsapp_pending_minutes)
    messages = WhatsAppMessageRepository(session).list_needing_attention(
        store_id, pending_before=pending_before
    )
    for message in messages:
        failed = message.status == WHATSAPP_STATUS_FAILED
        if failed:
            title = "WhatsApp Message Failed"
            text = f"Message to {message.recipient} could not be delivered"
            if message.error:
                text = f"{text}: {message.error}"
        else:
            title = "WhatsApp Message Pending"
            text = (
                f"Message to {message.recipient} has been waiting for more than "
                f"{settings.whatsapp_pending_minutes} minutes"
            )
        yield NotificationCandidate(
            type=NOTIFICATION_TYPE_WHATSAPP,
            title=title,
            message=text,
            priority=PRIORITY_HIGH if failed else PRIORITY_MEDIUM,
            related_entity=f"whatsapp_message:{message.id}",
            action_url="/store-panel/messages",
            metadata={
                "message_id": message.id,
                "recipient": message.recipient,
                "status": message.status,
                "queued_at": message.created_at.isoformat() if message.created_at else None,
            },
        )


# Registration order is the order scanners run and alerts are persisted.
DEFAULT_SCANNERS: dict[str, Scanner] = {
    NOTIFICATION_TYPE_LOW_STOCK: scan_low_stock,
    NOTIFICATION_TYPE_EXPIRY_ALERT: scan_expiring_batches,
    NOTIFICATION_TYPE_WHATSAPP: scan_whatsapp_queue,
}


__all__ = [
    "DEFAULT_SCANNERS",
    "Scanner",
    "days_until",
    "expiry_priority",
    "scan_expiring_batches",
    "scan_low_stock",
    "scan_whatsapp_queue",
]
