"""Schemas for notifications."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel

from .common import UTCDateTime
from .profiles import ActorSummary


class NotificationResponse(BaseModel):
    id: UUID
    type: str
    actor: ActorSummary | None = None
    content_type: str | None = None
    content_id: UUID | None = None
    message: str | None = None
    is_read: bool
    created_at: UTCDateTime


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]


class NotificationSummaryResponse(BaseModel):
    unread_count: int = 0


class NotificationMarkAllResponse(BaseModel):
    updated: int = 0


__all__ = [
    "NotificationResponse",
    "NotificationListResponse",
    "NotificationSummaryResponse",
    "NotificationMarkAllResponse",
]
