"""Use case for notifications raised directly by other subsystems."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.orm import Session

from shelfcure.domain.entities import (
    NOTIFICATION_PRIORITIES,
    NOTIFICATION_TYPES,
    PRIORITY_MEDIUM,
    Notification,
)
from shelfcure.domain.exceptions import NotificationValidationError, StoreNotFoundError
from shelfcure.infrastructure.notifications import dispatch_notification
from shelfcure.infrastructure.repositories import NotificationRepository, StoreRepository

logger = logging.getLogger(__name__)


def create_notification(
    session: Session,
    store_id: int,
    *,
    type: str,
    title: str,
    message: str,
    priority: str = PRIORITY_MEDIUM,
    related_entity: str | None = None,
    action_required: bool = False,
    action_url: str | None = None,
    metadata: dict[str, Any] | None = None,
    dispatch: Callable[[Notification], Any] | None = None,
) -> Notification:
    """Persist a notification for ``store_id`` and publish it to the store.

    Unlike generated alerts these are never deduplicated. Delivery failures
    are logged; the stored notification is returned regardless.
    """

    if type not in NOTIFICATION_TYPES:
        raise NotificationValidationError(f"Unknown notification type '{type}'")
    if priority not in NOTIFICATION_PRIORITIES:
        raise NotificationValidationError(f"Unknown priority '{priority}'")
    title = (title or "").strip()
    message = (message or "").strip()
    if not title or not message:
        raise NotificationValidationError("Title and message are required")

    if StoreRepository(session).get(store_id) is None:
        raise StoreNotFoundError(store_id)

    notification = NotificationRepository(session).create(
        Notification(
            id=None,
            store_id=store_id,
            type=type,
            title=title,
            message=message,
            priority=priority,
            related_entity=related_entity,
            action_required=action_required,
            action_url=action_url,
            metadata=dict(metadata or {}),
        )
    )

    dispatch = dispatch or dispatch_notification
    try:
        dispatch(notification)
    except Exception as exc:
        logger.warning(
            "Realtime delivery of notification %s failed: %s", notification.id, exc
        )
    return notification


__all__ = ["create_notification"]
