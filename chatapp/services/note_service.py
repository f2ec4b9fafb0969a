"""Business logic for short text notes shown above the conversation list."""
from __future__ import annotations

from datetime import datetime, timedelta
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from ..constants import NOTE_MAX_LENGTH
from ..models import Note
from ..schemas import NoteCreate
from . import ephemeral_service
from .ephemeral_service import NOTE_KIND, AuthorBucket


def _clean(value: str | None) -> str | None:
    return (value or "").strip() or None


def create_note(
    db: Session,
    *,
    author_id: UUID,
    payload: NoteCreate,
    now: datetime | None = None,
    ttl: timedelta | None = None,
) -> Note:
    content = payload.content.strip()
    if not content or len(content) > NOTE_MAX_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Notes must be between 1 and {NOTE_MAX_LENGTH} characters",
        )
    return ephemeral_service.create(
        db,
        NOTE_KIND,
        author_id=author_id,
        now=now,
        ttl=ttl,
        content=content,
        music_track_name=_clean(payload.music_track_name),
        music_artist=_clean(payload.music_artist),
        music_album_art=_clean(payload.music_album_art),
    )


def list_active_notes(db: Session, *, viewer_id: UUID, now: datetime | None = None) -> list[AuthorBucket]:
    return ephemeral_service.list_visible(db, NOTE_KIND, viewer_id=viewer_id, now=now)


def get_my_note(db: Session, *, author_id: UUID, now: datetime | None = None) -> Note | None:
    return ephemeral_service.latest_own(db, NOTE_KIND, author_id=author_id, now=now)


def mark_note_seen(db: Session, *, note_id: UUID, viewer_id: UUID, now: datetime | None = None) -> bool:
    return ephemeral_service.mark_seen(db, NOTE_KIND, content_id=note_id, viewer_id=viewer_id, now=now)


def toggle_note_like(
    db: Session, *, note_id: UUID, viewer_id: UUID, now: datetime | None = None
) -> tuple[bool, int]:
    return ephemeral_service.toggle_like(db, NOTE_KIND, content_id=note_id, viewer_id=viewer_id, now=now)


def delete_note(db: Session, *, note_id: UUID, actor_id: UUID) -> None:
    ephemeral_service.delete_own(db, NOTE_KIND, content_id=note_id, actor_id=actor_id)


__all__ = [
    "create_note",
    "list_active_notes",
    "get_my_note",
    "mark_note_seen",
    "toggle_note_like",
    "delete_note",
]
