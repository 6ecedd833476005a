"""Utility helpers to push notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from anyio import from_thread

from shelfcure.domain.entities import Notification
from shelfcure.domain.exceptions import DispatchError
from shelfcure.utils import humanize_time_ago

from .manager import StoreChannelManager, notification_manager

logger = logging.getLogger(__name__)

NEW_NOTIFICATION_EVENT = "new-notification"


class NotificationPublisher:
    """Serialize notifications and queue them for the store's channels."""

    def __init__(self, manager: StoreChannelManager) -> None:
        self._manager = manager

    def dispatch(self, notification: Notification) -> int:
        """Queue ``notification`` for every channel joined to its store.

        Works from the event loop and from anyio worker threads. Returns the
        number of channels the event was queued for.
        """

        message = {"type": NEW_NOTIFICATION_EVENT, "data": serialize_notification(notification)}
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return self._publish_from_thread(notification.store_id, message)
        return self._publish(notification.store_id, message)

    def _publish_from_thread(self, store_id: int, message: dict[str, Any]) -> int:
        try:
            return from_thread.run_sync(self._publish, store_id, message)
        except DispatchError:
            raise
        except RuntimeError:
            # Outside the server (scripts, unit tests) nobody can be subscribed.
            logger.debug("No running event loop; skipping realtime delivery to store %s", store_id)
            return 0

    def _publish(self, store_id: int, message: dict[str, Any]) -> int:
        try:
            return self._manager.publish(store_id, message)
        except Exception as exc:
            raise DispatchError(f"Could not publish to store {store_id}") from exc


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the JSON payload representation for ``notification``."""

    return {
        "id": notification.id,
        "store_id": notification.store_id,
        "type": notification.type,
        "priority": notification.priority,
        "title": notification.title,
        "message": notification.message,
        "is_read": notification.is_read,
        "related_entity": notification.related_entity,
        "action_required": notification.action_required,
        "action_url": notification.action_url,
        "metadata": notification.metadata or {},
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "time_ago": humanize_time_ago(notification.created_at),
    }


notification_publisher = NotificationPublisher(notification_manager)


def dispatch_notification(notification: Notification) -> int:
    """Public helper that delegates to the shared publisher instance."""

    return notification_publisher.dispatch(notification)


__all__ = [
    "NEW_NOTIFICATION_EVENT",
    "NotificationPublisher",
    "notification_publisher",
    "dispatch_notification",
    "serialize_notification",
]
