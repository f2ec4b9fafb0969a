"""System-level routes for health checks and client hints."""
from __future__ import annotations

from fastapi import APIRouter

from ..config import get_settings
from ..schemas import ClientConfigResponse

router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/api/client-config", response_model=ClientConfigResponse)
async def client_config() -> ClientConfigResponse:
    """Polling cadence for clients without a live socket."""

    settings = get_settings()
    return ClientConfigResponse(
        conversation_poll_seconds=settings.conversation_poll_seconds,
        conversation_list_poll_seconds=settings.conversation_list_poll_seconds,
        story_poll_seconds=settings.story_poll_seconds,
        ephemeral_ttl_hours=settings.ephemeral_ttl_hours,
    )
