"""Business logic for ephemeral stories."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Profile, Story, StoryComment, StoryView
from ..schemas import StoryCreate
from . import ephemeral_service
from .ephemeral_service import STORY_KIND, AuthorBucket
from .notification_service import NotificationType, actor_label, notify

logger = logging.getLogger(__name__)


def create_story(
    db: Session,
    *,
    author_id: UUID,
    payload: StoryCreate,
    now: datetime | None = None,
    ttl: timedelta | None = None,
) -> Story:
    media_url = payload.media_url.strip()
    if not media_url:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A story needs media")
    return ephemeral_service.create(
        db,
        STORY_KIND,
        author_id=author_id,
        now=now,
        ttl=ttl,
        media_url=media_url,
        media_type=payload.media_type,
        is_close_friends_only=payload.is_close_friends_only,
    )


def list_active_stories(db: Session, *, viewer_id: UUID, now: datetime | None = None) -> list[AuthorBucket]:
    return ephemeral_service.list_visible(db, STORY_KIND, viewer_id=viewer_id, now=now)


def mark_story_seen(db: Session, *, story_id: UUID, viewer_id: UUID, now: datetime | None = None) -> bool:
    return ephemeral_service.mark_seen(db, STORY_KIND, content_id=story_id, viewer_id=viewer_id, now=now)


def toggle_story_like(
    db: Session, *, story_id: UUID, viewer_id: UUID, now: datetime | None = None
) -> tuple[bool, int]:
    return ephemeral_service.toggle_like(db, STORY_KIND, content_id=story_id, viewer_id=viewer_id, now=now)


def reply_to_story(
    db: Session,
    *,
    story_id: UUID,
    author_id: UUID,
    content: str,
    now: datetime | None = None,
) -> StoryComment:
    """Leave a private reply on a story and let its author know."""

    story = ephemeral_service.get_visible_or_404(db, STORY_KIND, story_id, author_id, now=now)
    text = content.strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Reply cannot be empty")

    reply = StoryComment(story_id=story.id, profile_id=author_id, content=text)
    try:
        db.add(reply)
        db.commit()
        db.refresh(reply)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to reply to story") from exc

    if story.profile_id != author_id:
        notify(
            db,
            recipient_id=story.profile_id,
            actor_id=author_id,
            type_=NotificationType.COMMENT,
            content_type=STORY_KIND.name,
            content_id=story.id,
            message=f"{actor_label(db.get(Profile, author_id))} replied to your story: {text[:80]}",
        )
    return reply


def list_story_viewers(
    db: Session, *, story_id: UUID, owner_id: UUID, now: datetime | None = None
) -> list[StoryView]:
    return ephemeral_service.list_viewers(db, STORY_KIND, content_id=story_id, owner_id=owner_id, now=now)


def delete_story(db: Session, *, story_id: UUID, actor_id: UUID) -> None:
    ephemeral_service.delete_own(db, STORY_KIND, content_id=story_id, actor_id=actor_id)
    logger.info("Story %s deleted by %s", story_id, actor_id)


__all__ = [
    "create_story",
    "list_active_stories",
    "mark_story_seen",
    "toggle_story_like",
    "reply_to_story",
    "list_story_viewers",
    "delete_story",
]
