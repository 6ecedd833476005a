"""SQLAlchemy models for medicines and their batches."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression

from shelfcure.infrastructure.database import Base


class MedicineModel(Base):
    """Database representation of a stocked medicine."""

    __tablename__ = "medicine"

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("store.id"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    generic_name = Column(String(150), nullable=True)
    has_strips = Column(Boolean, nullable=False, default=True)
    has_individual = Column(Boolean, nullable=False, default=False)
    strip_stock = Column(Integer, nullable=False, default=0)
    strip_min_stock = Column(Integer, nullable=False, default=0)
    individual_stock = Column(Integer, nullable=False, default=0)
    individual_min_stock = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True, server_default=expression.true())

    batches = relationship("BatchModel", back_populates="medicine")


class BatchModel(Base):
    """Database representation of a medicine batch."""

    __tablename__ = "batch"
    __table_args__ = (
        UniqueConstraint("medicine_id", "batch_number", "store_id", name="uq_batch_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    medicine_id = Column(Integer, ForeignKey("medicine.id"), nullable=False, index=True)
    store_id = Column(Integer, ForeignKey("store.id"), nullable=False, index=True)
    batch_number = Column(String(60), nullable=False)
    expiry_date = Column(DateTime, nullable=False, index=True)
    strip_quantity = Column(Integer, nullable=False, default=0)
    individual_quantity = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True, server_default=expression.true())

    medicine = relationship("MedicineModel", back_populates="batches", lazy="joined")


__all__ = ["MedicineModel", "BatchModel"]
