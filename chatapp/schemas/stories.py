"""Pydantic schemas for ephemeral stories."""
from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from .common import UTCDateTime
from .profiles import ActorSummary


class StoryCreate(BaseModel):
    media_url: str = Field(..., min_length=1, max_length=2048)
    media_type: Literal["image", "video"] = "image"
    is_close_friends_only: bool = False


class StoryItem(BaseModel):
    id: UUID
    media_url: str
    media_type: str
    is_close_friends_only: bool = False
    created_at: UTCDateTime
    expires_at: UTCDateTime
    seen: bool = False
    liked: bool = False
    likes_count: int = 0


class StoryBucket(BaseModel):
    author: ActorSummary
    stories: list[StoryItem]
    has_unseen: bool
    is_close_friend: bool = False


class StoryFeedResponse(BaseModel):
    items: list[StoryBucket]


class StoryReplyCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=500)


class StoryReplyResponse(BaseModel):
    id: UUID
    story_id: UUID
    author: ActorSummary
    content: str
    created_at: UTCDateTime


class StoryViewerResponse(BaseModel):
    viewer: ActorSummary
    viewed_at: UTCDateTime


class StoryViewersResponse(BaseModel):
    story_id: UUID
    items: list[StoryViewerResponse]


__all__ = [
    "StoryCreate",
    "StoryItem",
    "StoryBucket",
    "StoryFeedResponse",
    "StoryReplyCreate",
    "StoryReplyResponse",
    "StoryViewerResponse",
    "StoryViewersResponse",
]
