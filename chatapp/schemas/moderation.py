"""Schemas describing admin moderation endpoints."""
from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from .common import UTCDateTime
from .conversations import MessageEntry
from .profiles import ActorSummary


class ModerationStats(BaseModel):
    total_profiles: int
    total_messages: int
    total_conversations: int
    active_last_24h: int = 0


class ModerationUserSummary(ActorSummary):
    is_admin: bool = False
    created_at: UTCDateTime
    last_seen: UTCDateTime | None = None


class ModerationUserList(BaseModel):
    total: int
    items: list[ModerationUserSummary]


class BadgeUpdateRequest(BaseModel):
    kind: Literal["none", "blue", "red", "gold"]
    label: str | None = Field(default=None, max_length=40)


class ImpersonationRequest(BaseModel):
    profile_id: UUID


class ModerationThreadResponse(BaseModel):
    """Read-only view of a conversation for admins; both participants are listed."""

    conversation_id: UUID
    participants: list[ActorSummary]
    messages: list[MessageEntry]


__all__ = [
    "ModerationStats",
    "ModerationUserSummary",
    "ModerationUserList",
    "BadgeUpdateRequest",
    "ImpersonationRequest",
    "ModerationThreadResponse",
]
