"""SQLAlchemy model for the outbound WhatsApp queue."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from shelfcure.infrastructure.database import Base
from shelfcure.utils import now_in_app_naive_datetime


class WhatsAppMessageModel(Base):
    """Database representation of a queued WhatsApp message."""

    __tablename__ = "whatsapp_message"

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("store.id"), nullable=False, index=True)
    recipient = Column(String(30), nullable=False)
    body = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="pending", index=True)
    error = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


__all__ = ["WhatsAppMessageModel"]
