"""Schemas for profile endpoints."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import UTCDateTime


class ActorSummary(BaseModel):
    """Compact profile shape embedded in messages, stories, posts and notifications."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    display_name: str
    avatar_url: str | None = None
    is_verified: bool = False
    verified_type: str | None = None
    badge_text: str | None = None


class ActorPresence(ActorSummary):
    last_seen: UTCDateTime | None = None


class ProfileResponse(ActorSummary):
    bio: str | None = None
    is_private: bool = False
    last_seen: UTCDateTime | None = None
    created_at: UTCDateTime


class ProfileDetailResponse(ProfileResponse):
    followers_count: int = 0
    following_count: int = 0
    is_following: bool = False
    is_own: bool = False


class ProfileUpdateRequest(BaseModel):
    display_name: str | None = Field(default=None, min_length=1, max_length=50)
    bio: str | None = Field(default=None, max_length=500)
    avatar_url: str | None = Field(default=None, max_length=1024)
    is_private: bool | None = None

    @field_validator("display_name", mode="before")
    def strip_display_name(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class ProfileSearchResponse(BaseModel):
    items: list[ActorSummary]


__all__ = [
    "ActorSummary",
    "ActorPresence",
    "ProfileResponse",
    "ProfileDetailResponse",
    "ProfileUpdateRequest",
    "ProfileSearchResponse",
]
