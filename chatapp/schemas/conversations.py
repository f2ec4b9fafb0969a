"""Schemas used by conversation and messaging endpoints."""
from __future__ import annotations

from typing import List, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .common import UTCDateTime
from .profiles import ActorPresence, ActorSummary


class ConversationCreate(BaseModel):
    participant_id: UUID = Field(..., description="Profile to open a two-party conversation with")


class ConversationResolveResponse(BaseModel):
    conversation_id: UUID
    is_new: bool
    participant: ActorSummary


class MessagePreview(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    content: str | None = None
    message_type: str
    created_at: UTCDateTime
    sender_id: UUID


class ConversationSummary(BaseModel):
    id: UUID
    updated_at: UTCDateTime
    participant: ActorPresence
    last_message: MessagePreview | None = None
    unread_count: int = 0


class ConversationListResponse(BaseModel):
    items: List[ConversationSummary]


class MessageSendRequest(BaseModel):
    content: str | None = Field(default=None, max_length=2000)
    message_type: Literal["text", "image", "file"] = "text"
    file_url: str | None = Field(default=None, max_length=2048)
    file_name: str | None = Field(default=None, max_length=255)


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    conversation_id: UUID
    sender_id: UUID
    content: str | None = None
    message_type: str
    file_url: str | None = None
    file_name: str | None = None
    is_read: bool
    created_at: UTCDateTime


class MessageEntry(BaseModel):
    """A message joined with its sender's profile summary."""

    message: MessageResponse
    sender: ActorSummary


class MessageThreadResponse(BaseModel):
    conversation_id: UUID
    participant: ActorPresence | None = None
    messages: List[MessageEntry]


class MarkReadRequest(BaseModel):
    message_ids: List[UUID] | None = Field(
        default=None,
        description="Messages to mark as read; omit to mark every unread message in the conversation",
    )


class MarkReadResponse(BaseModel):
    conversation_id: UUID
    updated: int
    unread_count: int


class UnreadCountResponse(BaseModel):
    conversation_id: UUID
    unread_count: int


__all__ = [
    "ConversationCreate",
    "ConversationResolveResponse",
    "MessagePreview",
    "ConversationSummary",
    "ConversationListResponse",
    "MessageSendRequest",
    "MessageResponse",
    "MessageEntry",
    "MessageThreadResponse",
    "MarkReadRequest",
    "MarkReadResponse",
    "UnreadCountResponse",
]
