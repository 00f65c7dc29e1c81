"""Endpoints and websocket handler for the notification feed."""

from __future__ import annotations

import logging
from typing import Any

import anyio
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
from sqlalchemy.orm import Session

from shopfeed.application.use_cases.notifications import (
    NotificationInbox,
    get_my_notification,
    count_unread as count_unread_uc,
    list_my_notifications as list_my_notifications_uc,
    list_sent_notifications as list_sent_notifications_uc,
    mark_all_read as mark_all_read_uc,
    mark_many_read,
    mark_read as mark_read_uc,
    send_notification as send_notification_uc,
)
from shopfeed.domain.entities import User
from shopfeed.domain.errors import NotificationError
from shopfeed.infrastructure.database import SessionLocal, get_db
from shopfeed.infrastructure.notifications import FeedSubscription, notification_feed
from shopfeed.interfaces.api.dependencies import get_current_active_user, resolve_current_user
from shopfeed.interfaces.api.routes_helpers import to_http_exception
from shopfeed.interfaces.api.schemas import (
    InboxSnapshotRead,
    MarkReadResult,
    NotificationMarkReadRequest,
    NotificationRead,
    NotificationSendRequest,
    NotificationSendResponse,
    SentNotificationRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    limit: int | None = Query(None, gt=0),
    unread_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[NotificationRead]:
    """Return the most recent notifications for the authenticated user."""

    try:
        items = list_my_notifications_uc(
            db, user_id=current_user.id, limit=limit, unread_only=unread_only
        )
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return [NotificationRead.from_entity(item) for item in items]


@router.get("/unread-count", response_model=UnreadCountRead)
def read_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> UnreadCountRead:
    try:
        unread = count_unread_uc(db, user_id=current_user.id)
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return UnreadCountRead(unread_count=unread)


@router.get("/sent", response_model=list[SentNotificationRead])
def list_sent_notifications(
    limit: int | None = Query(None, gt=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[SentNotificationRead]:
    """Return the notifications sent by the authenticated user."""

    try:
        summaries = list_sent_notifications_uc(db, sender_id=current_user.id, limit=limit)
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return [SentNotificationRead.from_entity(summary) for summary in summaries]


@router.post(
    "/", response_model=NotificationSendResponse, status_code=status.HTTP_201_CREATED
)
def send_notification(
    payload: NotificationSendRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationSendResponse:
    """Send a manual notification to the selected audience."""

    try:
        notification, recipient_count = send_notification_uc(
            db,
            sender=current_user,
            title=payload.title,
            message=payload.message,
            target=payload.target,
            recipient_ids=payload.recipient_ids,
        )
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return NotificationSendResponse(id=notification.id, recipient_count=recipient_count)


@router.post("/read-all", response_model=MarkReadResult)
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MarkReadResult:
    try:
        updated = mark_all_read_uc(db, user_id=current_user.id)
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return MarkReadResult(updated=updated)


@router.post("/read", response_model=MarkReadResult)
def mark_notifications_read(
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MarkReadResult:
    """Mark a batch of the caller's notifications as read."""

    try:
        updated = mark_many_read(
            db, user_id=current_user.id, notification_ids=payload.ids
        )
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return MarkReadResult(updated=updated)


@router.get("/{notification_id}", response_model=NotificationRead)
def read_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationRead:
    try:
        item = get_my_notification(
            db, user_id=current_user.id, notification_id=notification_id
        )
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return NotificationRead.from_entity(item)


@router.post("/{notification_id}/read", response_model=MarkReadResult)
def mark_notification_read(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MarkReadResult:
    """Mark one notification as read; repeated calls are no-ops."""

    try:
        changed = mark_read_uc(
            db, user_id=current_user.id, notification_id=notification_id
        )
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return MarkReadResult(updated=int(changed))


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Stream inbox snapshots to the authenticated user.

    A snapshot is sent right after connecting and again after every change to
    the user's delivery records. Reconnecting clients therefore always start
    from a full re-fetch. Store failures are reported as ``error`` messages
    and the connection stays open.
    """

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    try:
        user = await to_thread.run_sync(_authenticate, token)
    except HTTPException as exc:
        await websocket.close(code=1011 if exc.status_code >= 500 else 1008)
        return

    await websocket.accept()
    subscription = notification_feed.subscribe(user.id)
    inbox = NotificationInbox(user.id, SessionLocal)
    try:
        async with anyio.create_task_group() as task_group:
            task_group.start_soon(_push_snapshots, websocket, inbox, subscription)
            await _receive_messages(websocket, user.id)
            task_group.cancel_scope.cancel()
    finally:
        subscription.close()


def _authenticate(token: str) -> User:
    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
    finally:
        session.close()
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return user


async def _push_snapshots(
    websocket: WebSocket, inbox: NotificationInbox, subscription: FeedSubscription
) -> None:
    async def report_failure(exc: NotificationError) -> None:
        await websocket.send_json({"type": "error", "detail": str(exc)})

    try:
        async for snapshot in inbox.follow(subscription, on_failure=report_failure):
            payload = InboxSnapshotRead.from_snapshot(snapshot).model_dump(mode="json")
            await websocket.send_json({"type": "snapshot", "data": payload})
    except (WebSocketDisconnect, RuntimeError):
        logger.debug("Websocket closed while pushing a snapshot to %s", inbox.user_id)
        subscription.close()


async def _receive_messages(websocket: WebSocket, user_id: str) -> None:
    while True:
        try:
            message = await websocket.receive_json()
        except WebSocketDisconnect:
            return
        except (ValueError, KeyError):
            # Malformed JSON or a binary frame.
            await websocket.send_json({"type": "error", "detail": "Expected a JSON text frame"})
            continue

        if not isinstance(message, dict):
            continue

        message_type = message.get("type")
        error: str | None = None
        if message_type == "ping":
            await websocket.send_json({"type": "pong"})
        elif message_type == "ack":
            ids = message.get("ids", [])
            if isinstance(ids, list) and ids:
                error = await to_thread.run_sync(_acknowledge, user_id, ids)
        elif message_type == "ack_all":
            error = await to_thread.run_sync(_acknowledge_all, user_id)
        if error:
            await websocket.send_json({"type": "error", "detail": error})


def _acknowledge(user_id: str, ids: list[Any]) -> str | None:
    session = SessionLocal()
    try:
        mark_many_read(session, user_id=user_id, notification_ids=ids)
    except NotificationError as exc:
        logger.warning("Could not acknowledge notifications for %s: %s", user_id, exc)
        return str(exc)
    finally:
        session.close()
    return None


def _acknowledge_all(user_id: str) -> str | None:
    session = SessionLocal()
    try:
        mark_all_read_uc(session, user_id=user_id)
    except NotificationError as exc:
        logger.warning("Could not acknowledge notifications for %s: %s", user_id, exc)
        return str(exc)
    finally:
        session.close()
    return None
