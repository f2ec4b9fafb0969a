"""Admin-only business logic: platform stats, user listing and verification badges."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import BADGE_KINDS, BADGE_NONE, ROLE_ADMIN
from ..models import Conversation, Message, Profile, UserRole
from ..models.base import utcnow
from .conversation_service import ConversationEntry, get_conversation_or_404, list_conversations, participant_ids
from .message_service import MessageEntry, thread_entries

MAX_PAGE_LIMIT = 100

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PlatformStats:
    total_profiles: int
    total_messages: int
    total_conversations: int
    active_last_24h: int


def _normalize_pagination(skip: int | None, limit: int | None) -> tuple[int, int]:
    safe_skip = max(0, int(skip or 0))
    safe_limit = max(1, min(int(limit or 25), MAX_PAGE_LIMIT))
    return safe_skip, safe_limit


def load_platform_stats(db: Session) -> PlatformStats:
    active_cutoff = utcnow() - timedelta(hours=24)
    return PlatformStats(
        total_profiles=int(db.scalar(select(func.count(Profile.id))) or 0),
        total_messages=int(db.scalar(select(func.count(Message.id))) or 0),
        total_conversations=int(db.scalar(select(func.count(Conversation.id))) or 0),
        active_last_24h=int(db.scalar(select(func.count(Profile.id)).where(Profile.last_seen >= active_cutoff)) or 0),
    )


def list_users(
    db: Session,
    *,
    skip: int = 0,
    limit: int = 25,
    search: str | None = None,
) -> tuple[int, list[tuple[Profile, bool]]]:
    """Profiles newest first, each paired with whether its account holds the admin role."""

    safe_skip, safe_limit = _normalize_pagination(skip, limit)
    stmt = select(Profile)
    count_stmt = select(func.count(Profile.id))
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        clause = or_(func.lower(Profile.username).like(pattern), func.lower(Profile.display_name).like(pattern))
        stmt = stmt.where(clause)
        count_stmt = count_stmt.where(clause)

    total = int(db.scalar(count_stmt) or 0)
    profiles = list(db.scalars(stmt.order_by(Profile.created_at.desc(), Profile.id).offset(safe_skip).limit(safe_limit)))

    admin_accounts = set(
        db.scalars(
            select(UserRole.account_id).where(
                UserRole.role == ROLE_ADMIN,
                UserRole.account_id.in_([profile.account_id for profile in profiles] or [None]),
            )
        )
    )
    return total, [(profile, profile.account_id in admin_accounts) for profile in profiles]


def set_badge(db: Session, *, profile_id: UUID, kind: str, label: str | None = None, actor_id: UUID | None = None) -> Profile:
    """Set or clear a verification badge. Any kind other than ``none`` marks the profile verified."""

    if kind != BADGE_NONE and kind not in BADGE_KINDS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown badge kind")
    profile = db.get(Profile, profile_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

    if kind == BADGE_NONE:
        profile.is_verified = False
        profile.verified_type = None
        profile.badge_text = None
    else:
        profile.is_verified = True
        profile.verified_type = kind
        profile.badge_text = (label or "").strip() or None

    try:
        db.commit()
        db.refresh(profile)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update badge") from exc
    logger.info("Badge for profile %s set to %s by %s", profile_id, kind, actor_id)
    return profile


def list_user_conversations(db: Session, *, profile_id: UUID, admin_id: UUID | None = None) -> list[ConversationEntry]:
    """Conversations of ``profile_id`` as that user sees them. Read-only; nothing is marked read."""

    if db.get(Profile, profile_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    logger.info("Admin %s listed conversations of profile %s", admin_id, profile_id)
    return list_conversations(db, profile_id)


def load_conversation_thread(
    db: Session, *, conversation_id: UUID, admin_id: UUID | None = None
) -> tuple[list[Profile], list[MessageEntry]]:
    get_conversation_or_404(db, conversation_id)
    members = [db.get(Profile, member_id) for member_id in participant_ids(db, conversation_id)]
    logger.info("Admin %s opened conversation %s", admin_id, conversation_id)
    return [member for member in members if member is not None], thread_entries(db, conversation_id)


__all__ = [
    "PlatformStats",
    "load_platform_stats",
    "list_users",
    "set_badge",
    "list_user_conversations",
    "load_conversation_thread",
]
