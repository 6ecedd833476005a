"""Read access to store inventory used by the alert scanners."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from shelfcure.domain.entities import Batch, Medicine
from shelfcure.infrastructure.models import BatchModel, MedicineModel
from shelfcure.utils import ensure_app_naive_datetime, ensure_app_timezone


class InventoryRepository:
    """Query medicines and batches of a store."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_low_stock_medicines(self, store_id: int) -> Sequence[Medicine]:
        """Return active medicines at or below their minimum stock.

        Strip stock decides whenever strips are tracked; individual stock only
        counts for medicines sold exclusively as single units.
        """

        query = (
            self.session.query(MedicineModel)
            .filter(MedicineModel.store_id == store_id)
            .filter(MedicineModel.is_active.is_(True))
            .filter(
                or_(
                    and_(
                        MedicineModel.has_strips.is_(True),
                        MedicineModel.strip_stock <= MedicineModel.strip_min_stock,
                    ),
                    and_(
                        MedicineModel.has_strips.is_(False),
                        MedicineModel.has_individual.is_(True),
                        MedicineModel.individual_stock <= MedicineModel.individual_min_stock,
                    ),
                )
            )
            .order_by(MedicineModel.name, MedicineModel.id)
        )
        return [self._medicine_to_entity(model) for model in query.all()]

    def list_expiring_batches(
        self, store_id: int, *, start: datetime, end: datetime
    ) -> Sequence[tuple[Batch, Medicine]]:
        """Return stocked active batches expiring inside ``[start, end]``."""

        query = (
            self.session.query(BatchModel)
            .join(MedicineModel, BatchModel.medicine_id == MedicineModel.id)
            .filter(BatchModel.store_id == store_id)
            .filter(BatchModel.is_active.is_(True))
            .filter(MedicineModel.is_active.is_(True))
            .filter(BatchModel.strip_quantity + BatchModel.individual_quantity > 0)
            .filter(BatchModel.expiry_date >= ensure_app_naive_datetime(start))
            .filter(BatchModel.expiry_date <= ensure_app_naive_datetime(end))
            .order_by(BatchModel.expiry_date, BatchModel.id)
        )
        return [
            (self._batch_to_entity(model), self._medicine_to_entity(model.medicine))
            for model in query.all()
        ]

    def add_medicine(self, medicine: Medicine) -> Medicine:
        model = MedicineModel(
            store_id=medicine.store_id,
            name=medicine.name,
            generic_name=medicine.generic_name,
            has_strips=medicine.has_strips,
            has_individual=medicine.has_individual,
            strip_stock=medicine.strip_stock,
            strip_min_stock=medicine.strip_min_stock,
            individual_stock=medicine.individual_stock,
            individual_min_stock=medicine.individual_min_stock,
            is_active=medicine.is_active,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._medicine_to_entity(model)

    def add_batch(self, batch: Batch) -> Batch:
        model = BatchModel(
            medicine_id=batch.medicine_id,
            store_id=batch.store_id,
            batch_number=batch.batch_number,
            expiry_date=ensure_app_naive_datetime(batch.expiry_date),
            strip_quantity=batch.strip_quantity,
            individual_quantity=batch.individual_quantity,
            is_active=batch.is_active,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._batch_to_entity(model)

    @staticmethod
    def _medicine_to_entity(model: MedicineModel) -> Medicine:
        return Medicine(
            id=model.id,
            store_id=model.store_id,
            name=model.name,
            generic_name=model.generic_name,
            has_strips=model.has_strips,
            has_individual=model.has_individual,
            strip_stock=model.strip_stock,
            strip_min_stock=model.strip_min_stock,
            individual_stock=model.individual_stock,
            individual_min_stock=model.individual_min_stock,
            is_active=model.is_active,
        )

    @staticmethod
    def _batch_to_entity(model: BatchModel) -> Batch:
        return Batch(
            id=model.id,
            medicine_id=model.medicine_id,
            store_id=model.store_id,
            batch_number=model.batch_number,
            expiry_date=ensure_app_timezone(model.expiry_date),
            strip_quantity=model.strip_quantity,
            individual_quantity=model.individual_quantity,
            is_active=model.is_active,
        )


__all__ = ["InventoryRepository"]
