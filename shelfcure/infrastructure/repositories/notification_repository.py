"""Persistence helpers for notification entities."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Iterable

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from shelfcure.domain.entities import Notification
from shelfcure.domain.exceptions import PersistenceError
from shelfcure.infrastructure.models import NotificationModel
from shelfcure.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Provide storage operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_store(
        self,
        store_id: int,
        *,
        type: str | None = None,
        priority: str | None = None,
        is_read: bool | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int | None = 20,
    ) -> tuple[Sequence[Notification], int]:
        """Return one page of notifications plus the total matching count."""

        query = self._filtered_query(
            store_id, type=type, priority=priority, is_read=is_read, search=search
        )
        try:
            total = query.count()
            query = query.order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            )
            if skip:
                query = query.offset(skip)
            if limit is not None:
                query = query.limit(limit)
            models = query.all()
        except SQLAlchemyError as exc:
            raise PersistenceError("Could not load notifications") from exc
        return [self._to_entity(model) for model in models], total

    def count_unread(self, store_id: int) -> int:
        try:
            return self._filtered_query(store_id, is_read=False).count()
        except SQLAlchemyError as exc:
            raise PersistenceError("Could not count unread notifications") from exc

    def create(self, notification: Notification) -> Notification:
        """Persist ``notification`` without taking part in deduplication."""

        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        model.created_at = ensure_app_naive_datetime(now_in_app_timezone())
        try:
            self.session.add(model)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError("Could not persist notification") from exc

        self.session.refresh(model)
        return self._to_entity(model)

    def create_if_absent(
        self,
        notification: Notification,
        *,
        dedupe_window: timedelta,
        observed_at: datetime | None = None,
    ) -> Notification | None:
        """Persist ``notification`` unless an unresolved twin already exists.

        Returns ``None`` when the dedupe key is held by an unread notification
        created less than ``dedupe_window`` before ``observed_at`` (the moment
        the condition was detected, defaulting to now). Keys held by older
        unread notifications are released first so the condition can alert
        again. ``created_at`` is stamped at insert time.
        """

        key = notification.dedupe_key
        cutoff = (
            ensure_app_naive_datetime(observed_at or now_in_app_timezone()) - dedupe_window
        )

        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        model.dedupe_key = key
        try:
            self.session.query(NotificationModel).filter(
                NotificationModel.dedupe_key == key,
                NotificationModel.created_at < cutoff,
            ).update({NotificationModel.dedupe_key: None}, synchronize_session=False)
            # Stamped after the release statement opened the write transaction.
            model.created_at = ensure_app_naive_datetime(now_in_app_timezone())
            self.session.add(model)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.debug("Skipping duplicate notification for key %s", key)
            return None
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Could not persist notification {key}") from exc

        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_id: int, *, store_id: int) -> Notification | None:
        """Flag a single notification as read; ``None`` when out of scope."""

        try:
            model = self._get_model(notification_id, store_id)
            if model is None:
                return None
            if not model.is_read:
                model.is_read = True
                model.dedupe_key = None
                self.session.add(model)
                self.session.commit()
                self.session.refresh(model)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Could not update notification {notification_id}") from exc
        return self._to_entity(model)

    def mark_many_as_read(self, notification_ids: Iterable[int], *, store_id: int) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        try:
            updated = (
                self.session.query(NotificationModel)
                .filter(
                    NotificationModel.id.in_(ids),
                    NotificationModel.store_id == store_id,
                    NotificationModel.is_read.is_(False),
                )
                .update(
                    {NotificationModel.is_read: True, NotificationModel.dedupe_key: None},
                    synchronize_session=False,
                )
            )
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError("Could not mark notifications as read") from exc
        return updated

    def _get_model(self, notification_id: int, store_id: int) -> NotificationModel | None:
        return (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id == notification_id,
                NotificationModel.store_id == store_id,
            )
            .one_or_none()
        )

    def _filtered_query(
        self,
        store_id: int,
        *,
        type: str | None = None,
        priority: str | None = None,
        is_read: bool | None = None,
        search: str | None = None,
    ) -> Query:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.store_id == store_id
        )
        if type is not None:
            query = query.filter(NotificationModel.type == type)
        if priority is not None:
            query = query.filter(NotificationModel.priority == priority)
        if is_read is not None:
            query = query.filter(NotificationModel.is_read.is_(is_read))
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(
                or_(
                    func.lower(NotificationModel.title).like(pattern),
                    func.lower(NotificationModel.message).like(pattern),
                )
            )
        return query

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.store_id = notification.store_id
        model.type = notification.type
        model.priority = notification.priority
        model.title = notification.title
        model.message = notification.message
        model.is_read = notification.is_read
        model.related_entity = notification.related_entity
        model.action_required = notification.action_required
        model.action_url = notification.action_url
        model.metadata_ = notification.metadata or {}

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            store_id=model.store_id,
            type=model.type,
            title=model.title,
            message=model.message,
            priority=model.priority,
            is_read=model.is_read,
            related_entity=model.related_entity,
            action_required=model.action_required,
            action_url=model.action_url,
            metadata=model.metadata_ or {},
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]
