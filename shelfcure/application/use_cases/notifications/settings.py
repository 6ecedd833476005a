"""Use cases for the per-store notification toggles."""

from __future__ import annotations

from sqlalchemy.orm import Session

from shelfcure.domain.entities import NotificationSettings
from shelfcure.infrastructure.repositories import NotificationSettingsRepository


def get_notification_settings(session: Session, store_id: int) -> NotificationSettings:
    return NotificationSettingsRepository(session).get_or_create(store_id)


def update_notification_settings(
    session: Session,
    store_id: int,
    *,
    low_stock: bool | None = None,
    expiry_alerts: bool | None = None,
    whatsapp: bool | None = None,
) -> NotificationSettings:
    """Change the given toggles, leaving the others untouched."""

    repository = NotificationSettingsRepository(session)
    current = repository.get_or_create(store_id)
    if low_stock is not None:
        current.low_stock = low_stock
    if expiry_alerts is not None:
        current.expiry_alerts = expiry_alerts
    if whatsapp is not None:
        current.whatsapp = whatsapp
    return repository.update(current)


__all__ = ["get_notification_settings", "update_notification_settings"]
