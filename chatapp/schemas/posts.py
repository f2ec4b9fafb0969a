"""Pydantic schemas for post resources."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field

from .common import UTCDateTime
from .profiles import ActorSummary


class PostCreate(BaseModel):
    """Payload used by API clients when constructing a post."""

    caption: str | None = Field(default=None, max_length=2200)
    media_url: str = Field(..., min_length=1, max_length=2048)
    media_type: str = Field(default="image", pattern=r"^(image|video)$")


class PostResponse(BaseModel):
    """Serialized representation of a persisted post."""

    id: UUID
    author: ActorSummary
    caption: str | None = None
    media_url: str
    media_type: str
    created_at: UTCDateTime
    likes_count: int = 0
    comments_count: int = 0
    is_liked: bool = False
    is_saved: bool = False


class PostFeedResponse(BaseModel):
    """Envelope used when returning a collection of posts."""

    items: list[PostResponse]


class PostCommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=500)


class PostCommentResponse(BaseModel):
    id: UUID
    post_id: UUID
    author: ActorSummary
    content: str
    created_at: UTCDateTime


class PostCommentListResponse(BaseModel):
    items: list[PostCommentResponse]


class PostLikersResponse(BaseModel):
    post_id: UUID
    items: list[ActorSummary]


__all__ = [
    "PostCreate",
    "PostResponse",
    "PostFeedResponse",
    "PostCommentCreate",
    "PostCommentResponse",
    "PostCommentListResponse",
    "PostLikersResponse",
]
