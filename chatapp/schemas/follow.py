"""Schemas supporting follower and close friend APIs."""
from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel

from .profiles import ActorSummary


class FollowStatsResponse(BaseModel):
    profile_id: UUID
    followers_count: int
    following_count: int
    is_following: bool


class FollowActionResponse(FollowStatsResponse):
    status: Literal["followed", "unfollowed", "noop"]


class FollowListResponse(BaseModel):
    items: list[ActorSummary]


class CloseFriendActionResponse(BaseModel):
    profile_id: UUID
    is_close_friend: bool


__all__ = [
    "FollowStatsResponse",
    "FollowActionResponse",
    "FollowListResponse",
    "CloseFriendActionResponse",
]
