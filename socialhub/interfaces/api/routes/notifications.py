"""Endpoints and websocket handler for user notifications."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from fastapi.concurrency import run_in_threadpool

from socialhub.application.services import NotificationService, PushService
from socialhub.domain.entities import NotificationPage, NotificationSettingsUpdate
from socialhub.domain.errors import NotificationAccessDeniedError, NotificationNotFoundError
from socialhub.infrastructure.notifications import serialize_notification
from socialhub.interfaces.api.dependencies import (
    get_current_user_id,
    get_notification_service,
    get_push_service,
    parse_user_id,
)
from socialhub.interfaces.api.schemas import (
    NotificationListResponse,
    NotificationRead,
    NotificationSettingsRead,
    NotificationSettingsUpdateRequest,
    PaginationMeta,
    PushSubscriptionCreate,
    PushSubscriptionRead,
    UnreadCountResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _page_to_response(page: NotificationPage) -> NotificationListResponse:
    return NotificationListResponse(
        notifications=[NotificationRead.model_validate(item) for item in page.items],
        unread_count=page.unread_count,
        meta=PaginationMeta(total=page.total, offset=page.offset, limit=page.limit),
    )


def _ownership_error(exc: Exception) -> HTTPException:
    if isinstance(exc, NotificationNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))


@router.get("/", response_model=NotificationListResponse)
def list_notifications(
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    user_id: UUID = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    """Return the newest notifications of the caller."""

    return _page_to_response(service.list_notifications(user_id, offset=offset, limit=limit))


@router.get("/unread", response_model=NotificationListResponse)
def list_unread_notifications(
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    user_id: UUID = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    return _page_to_response(service.list_unread(user_id, offset=offset, limit=limit))


@router.get("/unread-count", response_model=UnreadCountResponse)
def read_unread_count(
    user_id: UUID = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> UnreadCountResponse:
    return UnreadCountResponse(unread_count=service.get_unread_count(user_id))


@router.put("/read-all", status_code=status.HTTP_204_NO_CONTENT)
def mark_all_notifications_read(
    user_id: UUID = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    service.mark_all_as_read(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
def delete_all_notifications(
    user_id: UUID = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    service.delete_all_notifications(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/settings", response_model=NotificationSettingsRead)
def read_notification_settings(
    user_id: UUID = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationSettingsRead:
    """Return the caller's preferences, creating the defaults on first access."""

    return NotificationSettingsRead.model_validate(service.get_settings(user_id))


@router.put("/settings", response_model=NotificationSettingsRead)
def update_notification_settings(
    payload: NotificationSettingsUpdateRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationSettingsRead:
    changes = NotificationSettingsUpdate(**payload.model_dump())
    return NotificationSettingsRead.model_validate(service.update_settings(user_id, changes))


@router.get("/push-subscriptions", response_model=list[PushSubscriptionRead])
def list_push_subscriptions(
    user_id: UUID = Depends(get_current_user_id),
    push: PushService = Depends(get_push_service),
) -> list[PushSubscriptionRead]:
    return [
        PushSubscriptionRead.model_validate(item) for item in push.list_subscriptions(user_id)
    ]


@router.post(
    "/push-subscriptions",
    response_model=PushSubscriptionRead,
    status_code=status.HTTP_201_CREATED,
)
def register_push_subscription(
    payload: PushSubscriptionCreate,
    user_id: UUID = Depends(get_current_user_id),
    push: PushService = Depends(get_push_service),
) -> PushSubscriptionRead:
    """Register a device token for push delivery."""

    try:
        subscription = push.subscribe(user_id, payload.token, payload.platform)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return PushSubscriptionRead.model_validate(subscription)


@router.delete("/push-subscriptions", status_code=status.HTTP_204_NO_CONTENT)
def remove_push_subscription(
    token: str = Query(..., min_length=1),
    user_id: UUID = Depends(get_current_user_id),
    push: PushService = Depends(get_push_service),
) -> Response:
    if not push.unsubscribe(user_id, token):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Push subscription not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the caller."""

    try:
        user_id = parse_user_id(websocket.query_params.get("user_id"))
    except HTTPException:
        await websocket.close(code=1008)
        return

    container = websocket.app.state.container
    service: NotificationService = container.services.notifications
    manager = container.infrastructure.connections

    try:
        pending = await run_in_threadpool(service.list_unread, user_id)
    except Exception:
        logger.exception("Failed to load pending notifications for user %s", user_id)
        await websocket.close(code=1011)
        return

    await manager.connect(user_id, websocket)
    try:
        if pending.items:
            await websocket.send_json(
                {
                    "type": "init",
                    "data": [serialize_notification(item) for item in pending.items],
                    "unread_count": pending.unread_count,
                }
            )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
            elif message_type == "ack":
                await run_in_threadpool(_acknowledge, service, user_id, message.get("ids"))
    except WebSocketDisconnect:
        manager.disconnect(user_id, websocket)
    except Exception:
        manager.disconnect(user_id, websocket)
        raise


def _acknowledge(service: NotificationService, user_id: UUID, ids: object) -> None:
    """Mark the acknowledged notifications as read, ignoring ids the caller does not own."""

    if not isinstance(ids, list):
        return
    for raw_id in ids:
        try:
            service.mark_as_read(UUID(str(raw_id)), user_id)
        except (ValueError, NotificationNotFoundError, NotificationAccessDeniedError):
            logger.debug("Ignoring acknowledgement of notification %s", raw_id)


@router.get("/{notification_id}", response_model=NotificationRead)
def read_notification(
    notification_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationRead:
    try:
        notification = service.get_notification(notification_id, user_id)
    except (NotificationNotFoundError, NotificationAccessDeniedError) as exc:
        raise _ownership_error(exc) from exc
    return NotificationRead.model_validate(notification)


@router.put("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_notification_read(
    notification_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    try:
        service.mark_as_read(notification_id, user_id)
    except (NotificationNotFoundError, NotificationAccessDeniedError) as exc:
        raise _ownership_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    try:
        service.delete_notification(notification_id, user_id)
    except (NotificationNotFoundError, NotificationAccessDeniedError) as exc:
        raise _ownership_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
