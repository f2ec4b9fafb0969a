"""API routes for notes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import Note
from ..schemas import ActorSummary, LikeStateResponse, NoteBucket, NoteCreate, NoteFeedResponse, NoteItem
from ..services import (
    ActorContext,
    create_note,
    delete_note,
    get_actor_context,
    get_my_note,
    list_active_notes,
    mark_note_seen,
    toggle_note_like,
)

router = APIRouter(prefix="/notes", tags=["notes"])


def _serialize_note(note: Note, *, seen: bool = False, liked: bool = False, likes_count: int = 0) -> NoteItem:
    return NoteItem(
        id=note.id,
        content=note.content,
        music_track_name=note.music_track_name,
        music_artist=note.music_artist,
        music_album_art=note.music_album_art,
        created_at=note.created_at,
        expires_at=note.expires_at,
        seen=seen,
        liked=liked,
        likes_count=likes_count,
    )


@router.get("/feed", response_model=NoteFeedResponse)
async def list_note_feed(
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> NoteFeedResponse:
    buckets = []
    for bucket in list_active_notes(db, viewer_id=context.actor_id):
        notes = [
            _serialize_note(item.content, seen=item.seen, liked=item.liked, likes_count=item.likes_count)
            for item in bucket.items
        ]
        buckets.append(
            NoteBucket(author=ActorSummary.model_validate(bucket.author), notes=notes, has_unseen=bucket.has_unseen)
        )
    return NoteFeedResponse(items=buckets)


@router.get("/me", response_model=NoteItem | None)
async def my_note_endpoint(
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> NoteItem | None:
    note = get_my_note(db, author_id=context.actor_id)
    return _serialize_note(note, seen=True) if note else None


@router.post("", response_model=NoteItem, status_code=status.HTTP_201_CREATED)
async def create_note_endpoint(
    payload: NoteCreate,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> NoteItem:
    note = create_note(db, author_id=context.actor_id, payload=payload)
    return _serialize_note(note, seen=True)


@router.post("/{note_id}/seen", status_code=status.HTTP_204_NO_CONTENT)
async def mark_note_seen_endpoint(
    note_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> Response:
    mark_note_seen(db, note_id=note_id, viewer_id=context.actor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{note_id}/like", response_model=LikeStateResponse)
async def toggle_note_like_endpoint(
    note_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> LikeStateResponse:
    liked, count = toggle_note_like(db, note_id=note_id, viewer_id=context.actor_id)
    return LikeStateResponse(liked=liked, likes_count=count)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note_endpoint(
    note_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> Response:
    delete_note(db, note_id=note_id, actor_id=context.actor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
