"""Endpoints and websocket handler for store notifications."""

from __future__ import annotations

import logging
from typing import Any
from uuid import uuid4

from anyio import to_thread
from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from shelfcure.application.use_cases.notifications import (
    GenerationSummary,
    count_unread,
    create_notification,
    generate_notifications,
    get_notification_settings,
    list_notifications,
    mark_notification_read,
    mark_notifications_read,
    update_notification_settings,
)
from shelfcure.domain.entities import Notification, NotificationSettings, User
from shelfcure.domain.exceptions import (
    NotificationNotFoundError,
    NotificationValidationError,
    PersistenceError,
    StoreNotFoundError,
)
from shelfcure.infrastructure.database import SessionLocal, get_db
from shelfcure.infrastructure.notifications import notification_manager, serialize_notification
from shelfcure.interfaces.api.dependencies import (
    can_access_store,
    get_current_store_id,
    resolve_current_user,
)
from shelfcure.interfaces.api.schemas import (
    GenerateNotificationsResponse,
    GenerationResultRead,
    MarkReadResultRead,
    NotificationCreate,
    NotificationListResponse,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
    NotificationResponse,
    NotificationSettingsRead,
    NotificationSettingsResponse,
    NotificationSettingsUpdate,
    PaginationRead,
    UnreadCountRead,
    UnreadCountResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)

# Events owned by other subsystems that clients broadcast to their store.
_RELAYED_EVENTS = {
    "inventory-update": "inventory-updated",
    "sale-completed": "sale-notification",
}


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(**serialize_notification(notification))


def _summary_to_schema(summary: GenerationSummary | None) -> GenerationResultRead:
    if summary is None:
        return GenerationResultRead(generated=0, duplicates=0)
    return GenerationResultRead(
        generated=summary.generated,
        duplicates=summary.duplicates,
        errors=list(summary.errors),
    )


def _settings_to_schema(settings: NotificationSettings) -> NotificationSettingsRead:
    return NotificationSettingsRead(
        store_id=settings.store_id,
        low_stock=settings.low_stock,
        expiry_alerts=settings.expiry_alerts,
        whatsapp=settings.whatsapp,
        updated_at=settings.updated_at,
    )


def _persistence_failure(exc: PersistenceError) -> HTTPException:
    logger.error("Notification storage failure: %s", exc, exc_info=exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Notification storage is unavailable",
    )


@router.get("", response_model=NotificationListResponse)
def list_store_notifications(
    type: str | None = Query(default=None, description="Notification type filter"),
    priority: str | None = Query(default=None, description="Priority filter"),
    is_read: bool | None = Query(default=None, description="Read state filter"),
    search: str | None = Query(default=None, description="Text searched in title and message"),
    page: int = Query(default=1),
    limit: int = Query(default=20),
    store_id: int = Depends(get_current_store_id),
    db: Session = Depends(get_db),
) -> NotificationListResponse:
    """Return the store's notifications, newest first."""

    try:
        result = list_notifications(
            db,
            store_id,
            type=type,
            priority=priority,
            is_read=is_read,
            search=search,
            page=page,
            limit=limit,
        )
    except NotificationValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise _persistence_failure(exc) from exc

    return NotificationListResponse(
        data=[_notification_to_schema(notification) for notification in result.items],
        pagination=PaginationRead(
            current_page=result.page,
            total_pages=result.total_pages,
            total_items=result.total,
            items_per_page=result.limit,
        ),
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(
    store_id: int = Depends(get_current_store_id),
    db: Session = Depends(get_db),
) -> UnreadCountResponse:
    try:
        count = count_unread(db, store_id)
    except PersistenceError as exc:
        raise _persistence_failure(exc) from exc
    return UnreadCountResponse(data=UnreadCountRead(count=count))


@router.post("/generate", response_model=GenerateNotificationsResponse)
def generate_store_notifications(
    store_id: int = Depends(get_current_store_id),
    db: Session = Depends(get_db),
):
    """Scan the store now and publish any new alerts."""

    try:
        summary = generate_notifications(db, store_id)
    except StoreNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except PersistenceError as exc:
        logger.error("Notification generation for store %s failed: %s", store_id, exc)
        body = GenerateNotificationsResponse(
            success=False,
            message="Failed to generate notifications",
            data=_summary_to_schema(exc.summary),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump()
        )

    return GenerateNotificationsResponse(
        success=True,
        message=(
            f"Generated {summary.generated} notifications "
            f"({summary.duplicates} duplicates skipped)"
        ),
        data=_summary_to_schema(summary),
    )


@router.post(
    "/create", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED
)
def create_store_notification(
    payload: NotificationCreate,
    store_id: int = Depends(get_current_store_id),
    db: Session = Depends(get_db),
) -> NotificationResponse:
    """Raise a notification for the caller's store, e.g. a payment reminder."""

    try:
        notification = create_notification(
            db,
            store_id,
            type=payload.type,
            title=payload.title,
            message=payload.message,
            priority=payload.priority,
            related_entity=payload.related_entity,
            action_required=payload.action_required,
            action_url=payload.action_url,
            metadata=payload.metadata,
        )
    except NotificationValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StoreNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise _persistence_failure(exc) from exc
    return NotificationResponse(data=_notification_to_schema(notification))


@router.post("/mark-read", response_model=NotificationMarkReadResponse)
def mark_many_read(
    payload: NotificationMarkReadRequest,
    store_id: int = Depends(get_current_store_id),
    db: Session = Depends(get_db),
) -> NotificationMarkReadResponse:
    try:
        updated = mark_notifications_read(db, store_id, payload.ids)
    except NotificationValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise _persistence_failure(exc) from exc
    return NotificationMarkReadResponse(
        message="Notifications marked as read",
        data=MarkReadResultRead(updated=updated),
    )


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: int,
    store_id: int = Depends(get_current_store_id),
    db: Session = Depends(get_db),
) -> NotificationResponse:
    """Acknowledge a single notification of the caller's store."""

    try:
        notification = mark_notification_read(db, store_id, notification_id)
    except NotificationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise _persistence_failure(exc) from exc
    return NotificationResponse(data=_notification_to_schema(notification))


@router.get("/settings", response_model=NotificationSettingsResponse)
def read_settings(
    store_id: int = Depends(get_current_store_id),
    db: Session = Depends(get_db),
) -> NotificationSettingsResponse:
    return NotificationSettingsResponse(
        data=_settings_to_schema(get_notification_settings(db, store_id))
    )


@router.put("/settings", response_model=NotificationSettingsResponse)
def write_settings(
    payload: NotificationSettingsUpdate,
    store_id: int = Depends(get_current_store_id),
    db: Session = Depends(get_db),
) -> NotificationSettingsResponse:
    settings = update_notification_settings(
        db,
        store_id,
        low_stock=payload.low_stock,
        expiry_alerts=payload.expiry_alerts,
        whatsapp=payload.whatsapp,
    )
    return NotificationSettingsResponse(data=_settings_to_schema(settings))


def _parse_store_id(data: Any) -> int | None:
    if isinstance(data, dict):
        data = data.get("store_id")
    if isinstance(data, bool):
        return None
    try:
        return int(data)
    except (TypeError, ValueError):
        return None


def _count_unread(store_id: int) -> int:
    session = SessionLocal()
    try:
        return count_unread(session, store_id)
    finally:
        session.close()


def _acknowledge(store_id: int, ids: list[int]) -> int:
    session = SessionLocal()
    try:
        return mark_notifications_read(session, store_id, ids)
    finally:
        session.close()


def _authenticate_socket(token: str) -> User:
    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
    finally:
        session.close()
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return user


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint streaming a store's notifications to its members."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    try:
        user = await to_thread.run_sync(_authenticate_socket, token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    channel_id = uuid4().hex
    await notification_manager.connect(channel_id, websocket)
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except (KeyError, ValueError):
                # Binary frames carry no "text" key; malformed text fails to decode.
                notification_manager.send(
                    channel_id, {"type": "error", "data": {"message": "Invalid JSON"}}
                )
                continue

            if not isinstance(message, dict):
                continue
            try:
                await _handle_client_message(channel_id, user, message)
            except PersistenceError as exc:
                logger.error("Websocket %s request failed: %s", message.get("type"), exc)
                notification_manager.send(
                    channel_id,
                    {"type": "error", "data": {"message": "Notification storage is unavailable"}},
                )
    except WebSocketDisconnect:
        pass
    finally:
        notification_manager.disconnect(channel_id)


async def _handle_client_message(channel_id: str, user: User, message: dict[str, Any]) -> None:
    message_type = message.get("type")
    data = message.get("data")
    if not isinstance(message_type, str):
        return

    if message_type == "ping":
        notification_manager.send(channel_id, {"type": "pong"})
        return

    if message_type == "join-store":
        store_id = _parse_store_id(data)
        if store_id is None:
            notification_manager.send(
                channel_id, {"type": "error", "data": {"message": "Store ID is required"}}
            )
            return
        if not can_access_store(user, store_id):
            notification_manager.send(
                channel_id,
                {"type": "error", "data": {"message": "Not authorized for this store"}},
            )
            return
        notification_manager.join(channel_id, store_id)
        unread = await to_thread.run_sync(_count_unread, store_id)
        notification_manager.send(
            channel_id,
            {"type": "joined", "data": {"store_id": store_id, "unread_count": unread}},
        )
        return

    if message_type == "leave-store":
        notification_manager.leave(channel_id)
        notification_manager.send(channel_id, {"type": "left"})
        return

    store_id = notification_manager.store_of(channel_id)

    if message_type == "ack":
        ids = data.get("ids") if isinstance(data, dict) else data
        if store_id is None or not isinstance(ids, list) or not ids:
            return
        valid_ids = [
            value for value in ids if isinstance(value, int) and not isinstance(value, bool)
        ]
        if not valid_ids:
            return
        updated = await to_thread.run_sync(_acknowledge, store_id, valid_ids)
        notification_manager.send(channel_id, {"type": "acked", "data": {"updated": updated}})
        return

    relayed = _RELAYED_EVENTS.get(message_type)
    if relayed and store_id is not None:
        notification_manager.publish(
            store_id, {"type": relayed, "data": data}, exclude=channel_id
        )
