"""Conversation and messaging API routes."""
from __future__ import annotations

import json
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.websockets import WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from ..database import create_session, get_session
from ..models import Message
from ..schemas import (
    ActorPresence,
    ActorSummary,
    ConversationCreate,
    ConversationListResponse,
    ConversationResolveResponse,
    ConversationSummary,
    MarkReadRequest,
    MarkReadResponse,
    MessageEntry,
    MessagePreview,
    MessageResponse,
    MessageSendRequest,
    MessageThreadResponse,
    UnreadCountResponse,
)
from ..services import (
    ActorContext,
    find_or_create,
    get_actor_context,
    list_conversations,
    list_messages,
    mark_read,
    other_participant,
    require_participant,
    resolve_actor_context,
    send_message,
    unread_count,
)
from ..services.realtime import conversation_channels

router = APIRouter(prefix="/conversations", tags=["conversations"])


def _to_message_response(message: Message) -> MessageResponse:
    return MessageResponse.model_validate(message)


@router.get("", response_model=ConversationListResponse)
async def list_conversations_endpoint(
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_session),
) -> ConversationListResponse:
    items: list[ConversationSummary] = []
    for entry in list_conversations(db, context.actor_id):
        if entry.participant is None:
            continue
        items.append(
            ConversationSummary(
                id=entry.conversation.id,
                updated_at=entry.conversation.updated_at,
                participant=ActorPresence.model_validate(entry.participant),
                last_message=MessagePreview.model_validate(entry.last_message) if entry.last_message else None,
                unread_count=entry.unread_count,
            )
        )
    return ConversationListResponse(items=items)


@router.post("", response_model=ConversationResolveResponse)
async def resolve_conversation_endpoint(
    payload: ConversationCreate,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_session),
) -> ConversationResolveResponse:
    conversation, created = find_or_create(db, actor_id=context.actor_id, other_id=payload.participant_id)
    participant = other_participant(db, conversation.id, context.actor_id)
    if participant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return ConversationResolveResponse(
        conversation_id=conversation.id,
        is_new=created,
        participant=ActorSummary.model_validate(participant),
    )


@router.get("/{conversation_id}/messages", response_model=MessageThreadResponse)
async def list_messages_endpoint(
    conversation_id: UUID,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_session),
) -> MessageThreadResponse:
    entries = list_messages(db, conversation_id=conversation_id, viewer_id=context.actor_id)
    participant = other_participant(db, conversation_id, context.actor_id)
    return MessageThreadResponse(
        conversation_id=conversation_id,
        participant=ActorPresence.model_validate(participant) if participant else None,
        messages=[
            MessageEntry(message=_to_message_response(entry.message), sender=ActorSummary.model_validate(entry.sender))
            for entry in entries
        ],
    )


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message_endpoint(
    conversation_id: UUID,
    payload: MessageSendRequest,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_session),
) -> MessageResponse:
    message = send_message(db, conversation_id=conversation_id, sender_id=context.actor_id, payload=payload)
    return _to_message_response(message)


@router.post("/{conversation_id}/read", response_model=MarkReadResponse)
async def mark_read_endpoint(
    conversation_id: UUID,
    payload: MarkReadRequest | None = None,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_session),
) -> MarkReadResponse:
    message_ids = payload.message_ids if payload is not None else None
    updated = mark_read(db, conversation_id=conversation_id, reader_id=context.actor_id, message_ids=message_ids)
    remaining = unread_count(db, conversation_id=conversation_id, viewer_id=context.actor_id)
    return MarkReadResponse(conversation_id=conversation_id, updated=updated, unread_count=remaining)


@router.get("/{conversation_id}/unread", response_model=UnreadCountResponse)
async def unread_count_endpoint(
    conversation_id: UUID,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_session),
) -> UnreadCountResponse:
    count = unread_count(db, conversation_id=conversation_id, viewer_id=context.actor_id)
    return UnreadCountResponse(conversation_id=conversation_id, unread_count=count)


@router.websocket("/{conversation_id}/ws")
async def conversation_socket(
    websocket: WebSocket,
    conversation_id: UUID,
    token: str = Query(..., alias="token"),
) -> None:
    db = create_session()
    try:
        context = resolve_actor_context(db, token)
        require_participant(db, conversation_id, context.actor_id)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    finally:
        db.close()

    await conversation_channels.connect(str(conversation_id), websocket)
    await websocket.send_text(json.dumps({"type": "ready", "conversation_id": str(conversation_id)}))
    try:
        while True:
            try:
                payload = await websocket.receive_text()
            except WebSocketDisconnect:
                break
            if payload.strip().lower() == "ping":
                await websocket.send_text(json.dumps({"type": "pong"}))
    finally:
        await conversation_channels.disconnect(websocket)
