"""Pydantic schemas for notes."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field

from .common import UTCDateTime
from .profiles import ActorSummary


class NoteCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=60)
    music_track_name: str | None = Field(default=None, max_length=200)
    music_artist: str | None = Field(default=None, max_length=200)
    music_album_art: str | None = Field(default=None, max_length=2048)


class NoteItem(BaseModel):
    id: UUID
    content: str
    music_track_name: str | None = None
    music_artist: str | None = None
    music_album_art: str | None = None
    created_at: UTCDateTime
    expires_at: UTCDateTime
    seen: bool = False
    liked: bool = False
    likes_count: int = 0


class NoteBucket(BaseModel):
    author: ActorSummary
    notes: list[NoteItem]
    has_unseen: bool


class NoteFeedResponse(BaseModel):
    items: list[NoteBucket]


__all__ = ["NoteCreate", "NoteItem", "NoteBucket", "NoteFeedResponse"]
