"""Errors raised by the notification pipeline."""

from __future__ import annotations

from typing import Any


class NotificationValidationError(ValueError):
    """Raised when request parameters are malformed."""


class NotificationNotFoundError(LookupError):
    """Raised when a notification is not visible in the caller's store scope."""

    def __init__(self, notification_id: int) -> None:
        super().__init__(f"Notification {notification_id} not found")
        self.notification_id = notification_id


class StoreNotFoundError(LookupError):
    """Raised when the requested store does not exist."""

    def __init__(self, store_id: int) -> None:
        super().__init__(f"Store {store_id} not found")
        self.store_id = store_id


class ScannerError(RuntimeError):
    """A single condition scanner failed during a generation run."""

    def __init__(self, scanner: str, cause: BaseException) -> None:
        super().__init__(f"{scanner} scanner failed: {cause}")
        self.scanner = scanner
        self.cause = cause


class DispatchError(RuntimeError):
    """Realtime delivery of a persisted notification failed."""


class PersistenceError(RuntimeError):
    """Reading or writing notifications failed at the storage layer.

    ``summary`` carries whatever a generation run completed before failing.
    """

    def __init__(self, message: str, *, summary: Any = None) -> None:
        super().__init__(message)
        self.summary = summary


__all__ = [
    "NotificationValidationError",
    "NotificationNotFoundError",
    "StoreNotFoundError",
    "ScannerError",
    "DispatchError",
    "PersistenceError",
]
