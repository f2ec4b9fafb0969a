"""Schemas for service metadata endpoints."""
from __future__ import annotations

from pydantic import BaseModel


class ClientConfigResponse(BaseModel):
    """Refresh cadence hints for clients that poll instead of holding a socket."""

    conversation_poll_seconds: float
    conversation_list_poll_seconds: float
    story_poll_seconds: float
    ephemeral_ttl_hours: int


__all__ = ["ClientConfigResponse"]
