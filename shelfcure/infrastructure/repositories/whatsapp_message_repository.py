"""Read access to the outbound WhatsApp queue."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from shelfcure.domain.entities import (
    WHATSAPP_STATUS_FAILED,
    WHATSAPP_STATUS_PENDING,
    WhatsAppMessage,
)
from shelfcure.infrastructure.models import WhatsAppMessageModel
from shelfcure.utils import ensure_app_naive_datetime, ensure_app_timezone, now_in_app_timezone


class WhatsAppMessageRepository:
    """Query queued WhatsApp messages of a store."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_needing_attention(
        self, store_id: int, *, pending_before: datetime
    ) -> Sequence[WhatsAppMessage]:
        """Return failed messages and those pending since before ``pending_before``."""

        query = (
            self.session.query(WhatsAppMessageModel)
            .filter(WhatsAppMessageModel.store_id == store_id)
            .filter(
                or_(
                    WhatsAppMessageModel.status == WHATSAPP_STATUS_FAILED,
                    and_(
                        WhatsAppMessageModel.status == WHATSAPP_STATUS_PENDING,
                        WhatsAppMessageModel.created_at
                        <= ensure_app_naive_datetime(pending_before),
                    ),
                )
            )
            .order_by(WhatsAppMessageModel.created_at, WhatsAppMessageModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def enqueue(self, message: WhatsAppMessage) -> WhatsAppMessage:
        model = WhatsAppMessageModel(
            store_id=message.store_id,
            recipient=message.recipient,
            body=message.body,
            status=message.status,
            error=message.error,
            created_at=ensure_app_naive_datetime(message.created_at or now_in_app_timezone()),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: WhatsAppMessageModel) -> WhatsAppMessage:
        return WhatsAppMessage(
            id=model.id,
            store_id=model.store_id,
            recipient=model.recipient,
            body=model.body,
            status=model.status,
            error=model.error,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["WhatsAppMessageRepository"]
