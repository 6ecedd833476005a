"""Persistence helpers for per-store notification settings."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shelfcure.domain.entities import NotificationSettings
from shelfcure.infrastructure.models import NotificationSettingsModel
from shelfcure.utils import ensure_app_timezone


class NotificationSettingsRepository:
    """Load and store the alert toggles of a store."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_or_create(self, store_id: int) -> NotificationSettings:
        model = self._get_model(store_id)
        if model is None:
            model = NotificationSettingsModel(store_id=store_id)
            self.session.add(model)
            try:
                self.session.commit()
            except IntegrityError:
                # Another request created the row first.
                self.session.rollback()
                model = self._get_model(store_id)
            else:
                self.session.refresh(model)
        return self._to_entity(model)

    def update(self, settings: NotificationSettings) -> NotificationSettings:
        model = self._get_model(settings.store_id)
        if model is None:
            model = NotificationSettingsModel(store_id=settings.store_id)
        model.low_stock = settings.low_stock
        model.expiry_alerts = settings.expiry_alerts
        model.whatsapp = settings.whatsapp
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _get_model(self, store_id: int) -> NotificationSettingsModel | None:
        return (
            self.session.query(NotificationSettingsModel)
            .filter(NotificationSettingsModel.store_id == store_id)
            .one_or_none()
        )

    @staticmethod
    def _to_entity(model: NotificationSettingsModel) -> NotificationSettings:
        return NotificationSettings(
            id=model.id,
            store_id=model.store_id,
            low_stock=model.low_stock,
            expiry_alerts=model.expiry_alerts,
            whatsapp=model.whatsapp,
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationSettingsRepository"]
