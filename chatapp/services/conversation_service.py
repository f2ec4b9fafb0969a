"""Two-party conversation lookup, creation and activity ordering."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Conversation, ConversationParticipant, Message, Profile
from ..models.base import utcnow
from ..security.policies import deny, is_participant

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ConversationEntry:
    conversation: Conversation
    participant: Optional[Profile]
    last_message: Optional[Message]
    unread_count: int


def get_conversation_or_404(db: Session, conversation_id: UUID) -> Conversation:
    conversation = db.get(Conversation, conversation_id)
    if conversation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found")
    return conversation


def participant_ids(db: Session, conversation_id: UUID) -> list[UUID]:
    stmt = select(ConversationParticipant.profile_id).where(
        ConversationParticipant.conversation_id == conversation_id
    )
    return list(db.scalars(stmt))


def require_participant(db: Session, conversation_id: UUID, actor_id: UUID) -> Conversation:
    """Return the conversation when ``actor_id`` takes part in it, otherwise deny."""

    conversation = get_conversation_or_404(db, conversation_id)
    if not is_participant(participant_ids(db, conversation_id), actor_id):
        deny(actor_id, "conversation.access", conversation_id)
    return conversation


def get_participant_row(db: Session, conversation_id: UUID, profile_id: UUID) -> ConversationParticipant | None:
    return db.scalar(
        select(ConversationParticipant).where(
            ConversationParticipant.conversation_id == conversation_id,
            ConversationParticipant.profile_id == profile_id,
        )
    )


def other_participant(db: Session, conversation_id: UUID, viewer_id: UUID) -> Profile | None:
    stmt = (
        select(Profile)
        .join(ConversationParticipant, ConversationParticipant.profile_id == Profile.id)
        .where(
            ConversationParticipant.conversation_id == conversation_id,
            ConversationParticipant.profile_id != viewer_id,
        )
        .limit(1)
    )
    return db.scalar(stmt)


def find_existing(db: Session, *, actor_id: UUID, other_id: UUID) -> Conversation | None:
    """Scan the actor's conversations for one that also includes ``other_id``."""

    own_rows = db.scalars(
        select(ConversationParticipant.conversation_id)
        .where(ConversationParticipant.profile_id == actor_id)
        .order_by(ConversationParticipant.created_at, ConversationParticipant.conversation_id)
    ).all()
    for conversation_id in own_rows:
        if get_participant_row(db, conversation_id, other_id) is not None:
            return db.get(Conversation, conversation_id)
    return None


def find_or_create(db: Session, *, actor_id: UUID, other_id: UUID) -> tuple[Conversation, bool]:
    """Return the conversation between the two profiles, creating it when none exists.

    The scan and the insert are separate statements, so two callers racing on
    the same pair can both end up creating a conversation.
    """

    if actor_id == other_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot start a conversation with yourself")
    if db.get(Profile, other_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

    existing = find_existing(db, actor_id=actor_id, other_id=other_id)
    if existing is not None:
        return existing, False

    conversation = Conversation()
    conversation.participants = [
        ConversationParticipant(profile_id=actor_id),
        ConversationParticipant(profile_id=other_id),
    ]
    try:
        db.add(conversation)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create conversation between %s and %s", actor_id, other_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to start conversation") from exc
    logger.info("Created conversation %s between %s and %s", conversation.id, actor_id, other_id)
    return conversation, True


def touch(db: Session, conversation: Conversation, *, now: datetime | None = None) -> None:
    """Bump the last-activity timestamp used for list ordering."""

    conversation.updated_at = now or utcnow()
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Failed to bump activity on conversation %s", conversation.id)


def count_unread(db: Session, conversation_id: UUID, viewer_id: UUID) -> int:
    stmt = (
        select(func.count())
        .select_from(Message)
        .where(
            Message.conversation_id == conversation_id,
            Message.sender_id != viewer_id,
            Message.is_read.is_(False),
        )
    )
    return int(db.scalar(stmt) or 0)


def last_message(db: Session, conversation_id: UUID) -> Message | None:
    stmt = (
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(1)
    )
    return db.scalar(stmt)


def list_conversations(db: Session, viewer_id: UUID) -> list[ConversationEntry]:
    """Conversations the viewer takes part in, most recently active first; ties by id."""

    stmt = (
        select(Conversation)
        .join(ConversationParticipant, ConversationParticipant.conversation_id == Conversation.id)
        .where(ConversationParticipant.profile_id == viewer_id)
        .order_by(Conversation.updated_at.desc(), Conversation.id.asc())
    )
    entries: list[ConversationEntry] = []
    for conversation in db.scalars(stmt).unique():
        entries.append(
            ConversationEntry(
                conversation=conversation,
                participant=other_participant(db, conversation.id, viewer_id),
                last_message=last_message(db, conversation.id),
                unread_count=count_unread(db, conversation.id, viewer_id),
            )
        )
    return entries


__all__ = [
    "ConversationEntry",
    "get_conversation_or_404",
    "participant_ids",
    "require_participant",
    "get_participant_row",
    "other_participant",
    "find_existing",
    "find_or_create",
    "touch",
    "count_unread",
    "last_message",
    "list_conversations",
]
