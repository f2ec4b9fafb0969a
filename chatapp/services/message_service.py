"""Messaging domain services: append, read state and typed thread listing."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..models import Message, Profile
from ..models.base import ensure_aware, utcnow
from ..schemas import MessageSendRequest
from ..security.policies import can_send_message, deny
from .conversation_service import (
    count_unread,
    get_conversation_or_404,
    get_participant_row,
    participant_ids,
    require_participant,
    touch,
)
from .realtime import conversation_channels, profile_channels

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MessageEntry:
    """A message joined with the profile that sent it."""

    message: Message
    sender: Profile


def _validate_payload(payload: MessageSendRequest) -> tuple[str | None, str | None, str | None]:
    content = (payload.content or "").strip() or None
    file_url = (payload.file_url or "").strip() or None
    file_name = (payload.file_name or "").strip() or None
    if payload.message_type == "text":
        if content is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message cannot be empty")
        return content, None, None
    if file_url is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"A file_url is required for {payload.message_type} messages",
        )
    return content, file_url, file_name


def send_message(
    db: Session,
    *,
    conversation_id: UUID,
    sender_id: UUID,
    payload: MessageSendRequest,
    now: datetime | None = None,
) -> Message:
    """Append a message, bump the conversation's activity and trigger a refresh.

    Nothing is written when validation or authorization fails, so the caller
    can resubmit the same payload.
    """

    content, file_url, file_name = _validate_payload(payload)
    conversation = get_conversation_or_404(db, conversation_id)
    members = participant_ids(db, conversation_id)
    if not can_send_message(members, sender_id):
        deny(sender_id, "message.send", conversation_id)

    message = Message(
        conversation_id=conversation_id,
        sender_id=sender_id,
        content=content,
        message_type=payload.message_type,
        file_url=file_url,
        file_name=file_name,
    )
    if now is not None:
        message.created_at = now
    try:
        db.add(message)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to persist message in conversation %s", conversation_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to send message") from exc

    touch(db, conversation, now=now)

    event = {
        "type": "message.created",
        "conversation_id": str(conversation_id),
        "message_id": str(message.id),
    }
    conversation_channels.schedule(conversation_id, event)
    profile_channels.schedule([member for member in members if member != sender_id], event)
    return message


def mark_read(
    db: Session,
    *,
    conversation_id: UUID,
    reader_id: UUID,
    message_ids: Sequence[UUID] | None = None,
    now: datetime | None = None,
) -> int:
    """Flip unread messages from the other participant to read and advance the reader's watermark.

    Already-read messages and ids outside the conversation are ignored, so
    repeating the call changes nothing.
    """

    require_participant(db, conversation_id, reader_id)
    stmt = (
        update(Message)
        .where(
            Message.conversation_id == conversation_id,
            Message.sender_id != reader_id,
            Message.is_read.is_(False),
        )
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    if message_ids is not None:
        if not message_ids:
            return 0
        stmt = stmt.where(Message.id.in_(list(message_ids)))

    reference = now or utcnow()
    participant = get_participant_row(db, conversation_id, reader_id)
    try:
        result = db.execute(stmt)
        if participant is not None:
            current = participant.last_read_at
            if current is None or ensure_aware(current) < ensure_aware(reference):
                participant.last_read_at = reference
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to mark messages read") from exc

    updated = int(result.rowcount or 0)
    if updated:
        db.expire_all()
        conversation_channels.schedule(
            conversation_id,
            {"type": "message.read", "conversation_id": str(conversation_id), "reader_id": str(reader_id)},
        )
    return updated


def unread_count(db: Session, *, conversation_id: UUID, viewer_id: UUID) -> int:
    require_participant(db, conversation_id, viewer_id)
    return count_unread(db, conversation_id, viewer_id)


def thread_entries(db: Session, conversation_id: UUID) -> list[MessageEntry]:
    """Messages oldest first, each paired with its sender. No access check."""

    stmt = (
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .options(selectinload(Message.sender))
        .order_by(Message.created_at.asc(), Message.id.asc())
    )
    return [MessageEntry(message=message, sender=message.sender) for message in db.scalars(stmt)]


def list_messages(db: Session, *, conversation_id: UUID, viewer_id: UUID) -> list[MessageEntry]:
    """Return the conversation's messages oldest first, each paired with its sender."""

    require_participant(db, conversation_id, viewer_id)
    return thread_entries(db, conversation_id)


__all__ = ["MessageEntry", "send_message", "mark_read", "unread_count", "thread_entries", "list_messages"]
