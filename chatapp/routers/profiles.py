"""Profile API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_session
from ..schemas import (
    ActorSummary,
    ProfileDetailResponse,
    ProfileResponse,
    ProfileSearchResponse,
    ProfileUpdateRequest,
)
from ..services import ActorContext, get_actor_context, get_profile_detail, search_profiles, update_profile

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/search", response_model=ProfileSearchResponse)
async def search_profiles_endpoint(
    q: str = Query("", max_length=50),
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> ProfileSearchResponse:
    """Find people by handle or display name to start a conversation with."""

    profiles = search_profiles(db, query=q, viewer_id=context.actor_id)
    return ProfileSearchResponse(items=[ActorSummary.model_validate(profile) for profile in profiles])


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    payload: ProfileUpdateRequest,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> ProfileResponse:
    updated = update_profile(db, profile_id=context.actor_id, payload=payload)
    return ProfileResponse.model_validate(updated, from_attributes=True)


@router.get("/{username}", response_model=ProfileDetailResponse)
async def retrieve_profile(
    username: str,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> ProfileDetailResponse:
    detail = get_profile_detail(db, username=username, viewer_id=context.actor_id)
    base = ProfileResponse.model_validate(detail.pop("profile"), from_attributes=True)
    return ProfileDetailResponse(**base.model_dump(), **detail)
