"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, JSON, String, Text
from sqlalchemy.sql import expression

from shelfcure.infrastructure.database import Base
from shelfcure.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for store notifications."""

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("store.id"), nullable=False, index=True)
    type = Column(String(30), nullable=False)
    priority = Column(String(10), nullable=False, default="medium")
    title = Column(String(120), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    related_entity = Column(String(120), nullable=True)
    action_required = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    action_url = Column(String(255), nullable=True)
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    # Set while the alert is unresolved; NULL once read or superseded.
    dedupe_key = Column(String(200), nullable=True)

    __table_args__ = (
        Index(
            "uq_notification_dedupe_key",
            "dedupe_key",
            unique=True,
            sqlite_where=dedupe_key.isnot(None),
            postgresql_where=dedupe_key.isnot(None),
        ),
        Index("ix_notification_store_created", "store_id", "created_at"),
        Index("ix_notification_store_read", "store_id", "is_read", "created_at"),
    )


__all__ = ["NotificationModel"]
