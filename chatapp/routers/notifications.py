"""Notification API routes."""
from __future__ import annotations

import json
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from ..database import create_session, get_session
from ..models import Notification
from ..schemas import (
    ActorSummary,
    NotificationListResponse,
    NotificationMarkAllResponse,
    NotificationResponse,
    NotificationSummaryResponse,
)
from ..services import (
    ActorContext,
    count_unread_notifications,
    get_actor_context,
    list_notifications,
    mark_all_read,
    mark_notification_read,
    resolve_actor_context,
)
from ..services.realtime import profile_channels

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _to_notification_response(record: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=record.id,
        type=record.type,
        actor=ActorSummary.model_validate(record.actor) if record.actor is not None else None,
        content_type=record.content_type,
        content_id=record.content_id,
        message=record.message,
        is_read=record.is_read,
        created_at=record.created_at,
    )


@router.get("", response_model=NotificationListResponse)
async def list_my_notifications(
    limit: int = Query(50, ge=1, le=100),
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> NotificationListResponse:
    records = list_notifications(db, context.actor_id, limit=limit)
    return NotificationListResponse(items=[_to_notification_response(item) for item in records])


@router.get("/summary", response_model=NotificationSummaryResponse)
async def notification_summary_endpoint(
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> NotificationSummaryResponse:
    return NotificationSummaryResponse(unread_count=count_unread_notifications(db, context.actor_id))


@router.post("/read-all", response_model=NotificationMarkAllResponse)
async def mark_all_notifications_read(
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> NotificationMarkAllResponse:
    return NotificationMarkAllResponse(updated=mark_all_read(db, context.actor_id))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read_endpoint(
    notification_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> NotificationResponse:
    record = mark_notification_read(db, notification_id=notification_id, profile_id=context.actor_id)
    return _to_notification_response(record)


@router.websocket("/ws")
async def notifications_socket(
    websocket: WebSocket,
    token: str = Query(..., alias="token"),
) -> None:
    db = create_session()
    try:
        profile_id = resolve_actor_context(db, token).actor_id
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    finally:
        db.close()

    await profile_channels.connect(str(profile_id), websocket)
    await websocket.send_text(json.dumps({"type": "ready"}))
    try:
        while True:
            try:
                payload = await websocket.receive_text()
            except WebSocketDisconnect:
                break
            if payload.strip().lower() == "ping":
                await websocket.send_text(json.dumps({"type": "pong"}))
    finally:
        await profile_channels.disconnect(websocket)
