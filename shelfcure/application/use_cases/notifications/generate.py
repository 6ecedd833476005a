"""Generation coordinator: scan, deduplicate, persist and publish alerts."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from shelfcure.config import Settings, get_settings
from shelfcure.domain.entities import Notification, NotificationCandidate
from shelfcure.domain.exceptions import (
    DispatchError,
    PersistenceError,
    ScannerError,
    StoreNotFoundError,
)
from shelfcure.infrastructure.notifications import dispatch_notification
from shelfcure.infrastructure.repositories import (
    NotificationRepository,
    NotificationSettingsRepository,
    StoreRepository,
)
from shelfcure.utils import ensure_app_timezone, now_in_app_timezone

from .scanners import DEFAULT_SCANNERS, Scanner

logger = logging.getLogger(__name__)

Dispatcher = Callable[[Notification], Any]


@dataclass
class GenerationSummary:
    """Outcome of one generation run for a store."""

    store_id: int
    generated: int = 0
    duplicates: int = 0
    errors: list[str] = field(default_factory=list)
    dispatch_errors: list[str] = field(default_factory=list)
    notifications: list[Notification] = field(default_factory=list)


def generate_notifications(
    session: Session,
    store_id: int,
    *,
    scanners: Mapping[str, Scanner] | None = None,
    dispatch: Dispatcher | None = None,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> GenerationSummary:
    """Run every enabled scanner for ``store_id`` and persist new alerts.

    Scanner and dispatch failures are recorded in the returned summary.
    A :class:`PersistenceError` aborts the run; notifications stored before
    the failure stay stored, and calling again is safe because repeats of an
    unresolved alert are skipped.
    """

    settings = settings or get_settings()
    scanners = DEFAULT_SCANNERS if scanners is None else scanners
    dispatch = dispatch or dispatch_notification
    now = ensure_app_timezone(now) if now else now_in_app_timezone()

    if StoreRepository(session).get(store_id) is None:
        raise StoreNotFoundError(store_id)

    summary = GenerationSummary(store_id=store_id)
    candidates = _collect_candidates(session, store_id, scanners, settings, now, summary)

    repository = NotificationRepository(session)
    window = timedelta(hours=settings.notification_dedupe_window_hours)
    for candidate in candidates:
        notification = Notification.from_candidate(candidate, store_id=store_id)
        try:
            saved = repository.create_if_absent(
                notification, dedupe_window=window, observed_at=now
            )
        except PersistenceError as exc:
            logger.error(
                "Notification generation for store %s aborted after %s alerts",
                store_id,
                summary.generated,
            )
            raise PersistenceError(str(exc), summary=summary) from exc

        if saved is None:
            summary.duplicates += 1
            continue

        summary.generated += 1
        summary.notifications.append(saved)
        _publish(saved, dispatch, summary)

    logger.info(
        "Notification generation for store %s: %s generated, %s duplicates, %s scanner errors",
        store_id,
        summary.generated,
        summary.duplicates,
        len(summary.errors),
    )
    return summary


def _collect_candidates(
    session: Session,
    store_id: int,
    scanners: Mapping[str, Scanner],
    settings: Settings,
    now: datetime,
    summary: GenerationSummary,
) -> list[NotificationCandidate]:
    store_settings = NotificationSettingsRepository(session).get_or_create(store_id)
    candidates: list[NotificationCandidate] = []
    for notification_type, scanner in scanners.items():
        if not store_settings.is_enabled(notification_type):
            logger.debug("Skipping disabled %s scanner for store %s", notification_type, store_id)
            continue
        try:
            found = list(scanner(session, store_id, settings=settings, now=now))
        except Exception as exc:
            session.rollback()
            error = ScannerError(notification_type, exc)
            logger.exception("Store %s: %s", store_id, error)
            summary.errors.append(str(error))
            continue
        candidates.extend(found)
    return candidates


def _publish(notification: Notification, dispatch: Dispatcher, summary: GenerationSummary) -> None:
    try:
        dispatch(notification)
    except Exception as exc:
        error = exc if isinstance(exc, DispatchError) else DispatchError(str(exc))
        logger.warning(
            "Realtime delivery of notification %s failed: %s", notification.id, error
        )
        summary.dispatch_errors.append(f"notification {notification.id}: {error}")


def generate_for_active_stores(
    session_factory: sessionmaker | Callable[[], Session],
    **options: Any,
) -> list[GenerationSummary]:
    """Run :func:`generate_notifications` for every active store.

    Each store gets its own session; a failing store is logged and skipped.
    """

    session = session_factory()
    try:
        store_ids = list(StoreRepository(session).list_active_ids())
    finally:
        session.close()

    summaries: list[GenerationSummary] = []
    for store_id in store_ids:
        session = session_factory()
        try:
            summaries.append(generate_notifications(session, store_id, **options))
        except Exception:
            logger.exception("Scheduled notification generation failed for store %s", store_id)
        finally:
            session.close()
    return summaries


__all__ = [
    "GenerationSummary",
    "generate_notifications",
    "generate_for_active_stores",
]
