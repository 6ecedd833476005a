"""Persistence layer for store data."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from shelfcure.domain.entities import Store
from shelfcure.infrastructure.models import StoreModel
from shelfcure.utils import ensure_app_naive_datetime, ensure_app_timezone, now_in_app_timezone


class StoreRepository:
    """Provide read and create operations for stores."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, store_id: int) -> Store | None:
        model = self.session.get(StoreModel, store_id)
        return self._to_entity(model) if model else None

    def list_active_ids(self) -> Sequence[int]:
        query = (
            self.session.query(StoreModel.id)
            .filter(StoreModel.is_active.is_(True))
            .order_by(StoreModel.id)
        )
        return [store_id for (store_id,) in query.all()]

    def create(self, store: Store) -> Store:
        model = StoreModel(
            name=store.name,
            is_active=store.is_active,
            created_at=ensure_app_naive_datetime(store.created_at or now_in_app_timezone()),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: StoreModel) -> Store:
        return Store(
            id=model.id,
            name=model.name,
            is_active=model.is_active,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["StoreRepository"]
