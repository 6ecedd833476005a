"""SQLAlchemy model for the store table."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import expression

from shelfcure.infrastructure.database import Base
from shelfcure.utils import now_in_app_naive_datetime


class StoreModel(Base):
    """Database representation of a store."""

    __tablename__ = "store"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default=expression.true())
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


__all__ = ["StoreModel"]
