"""Domain entity for queued outbound WhatsApp messages."""

from dataclasses import dataclass
from datetime import datetime

WHATSAPP_STATUS_PENDING = "pending"
WHATSAPP_STATUS_SENT = "sent"
WHATSAPP_STATUS_FAILED = "failed"


@dataclass
class WhatsAppMessage:
    """Message waiting in, or already processed by, the outbound queue."""

    id: int | None
    store_id: int
    recipient: str
    body: str
    status: str
    error: str | None
    created_at: datetime | None


__all__ = [
    "WhatsAppMessage",
    "WHATSAPP_STATUS_PENDING",
    "WHATSAPP_STATUS_SENT",
    "WHATSAPP_STATUS_FAILED",
]
