"""Use cases reading notifications and acknowledging them."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sqlalchemy.orm import Session

from shelfcure.domain.entities import NOTIFICATION_PRIORITIES, NOTIFICATION_TYPES, Notification
from shelfcure.domain.exceptions import NotificationNotFoundError, NotificationValidationError
from shelfcure.infrastructure.repositories import NotificationRepository

MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class NotificationPage:
    """One page of a store's notifications, newest first."""

    items: Sequence[Notification]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def list_notifications(
    session: Session,
    store_id: int,
    *,
    type: str | None = None,
    priority: str | None = None,
    is_read: bool | None = None,
    search: str | None = None,
    page: int = 1,
    limit: int = 20,
) -> NotificationPage:
    """Return notifications of ``store_id`` ordered by creation, newest first."""

    if type is not None and type not in NOTIFICATION_TYPES:
        raise NotificationValidationError(f"Unknown notification type '{type}'")
    if priority is not None and priority not in NOTIFICATION_PRIORITIES:
        raise NotificationValidationError(f"Unknown priority '{priority}'")
    if page < 1:
        raise NotificationValidationError("page must be greater than or equal to 1")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise NotificationValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")

    search = search.strip() if search else None
    items, total = NotificationRepository(session).list_for_store(
        store_id,
        type=type,
        priority=priority,
        is_read=is_read,
        search=search or None,
        skip=(page - 1) * limit,
        limit=limit,
    )
    return NotificationPage(items=items, page=page, limit=limit, total=total)


def mark_notification_read(session: Session, store_id: int, notification_id: int) -> Notification:
    """Flag a notification as read. Calling it again is a no-op."""

    notification = NotificationRepository(session).mark_as_read(
        notification_id, store_id=store_id
    )
    if notification is None:
        raise NotificationNotFoundError(notification_id)
    return notification


def mark_notifications_read(
    session: Session, store_id: int, notification_ids: Iterable[int]
) -> int:
    """Flag several notifications as read; ids outside the store are ignored."""

    unique_ids = list(dict.fromkeys(notification_ids))
    if not unique_ids:
        raise NotificationValidationError("Notification IDs array is required")
    return NotificationRepository(session).mark_many_as_read(unique_ids, store_id=store_id)


def count_unread(session: Session, store_id: int) -> int:
    return NotificationRepository(session).count_unread(store_id)


__all__ = [
    "MAX_PAGE_SIZE",
    "NotificationPage",
    "count_unread",
    "list_notifications",
    "mark_notification_read",
    "mark_notifications_read",
]
