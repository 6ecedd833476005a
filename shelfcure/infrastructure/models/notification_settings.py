"""SQLAlchemy model for per-store notification toggles."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer
from sqlalchemy.sql import expression

from shelfcure.infrastructure.database import Base
from shelfcure.utils import now_in_app_naive_datetime


class NotificationSettingsModel(Base):
    """Database representation of the alert types enabled for a store."""

    __tablename__ = "notification_settings"

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("store.id"), nullable=False, unique=True)
    low_stock = Column(Boolean, nullable=False, default=True, server_default=expression.true())
    expiry_alerts = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    whatsapp = Column(Boolean, nullable=False, default=True, server_default=expression.true())
    updated_at = Column(
        DateTime,
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["NotificationSettingsModel"]
