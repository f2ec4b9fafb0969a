"""Business logic for reading, searching and updating profiles."""
from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Profile
from ..schemas import ProfileUpdateRequest
from .follow_service import get_follow_stats

SEARCH_LIMIT = 10


def get_profile_by_username(db: Session, username: str) -> Profile:
    profile = db.scalar(select(Profile).where(func.lower(Profile.username) == username.strip().lower()))
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


def get_profile_detail(db: Session, *, username: str, viewer_id: UUID) -> dict[str, Any]:
    """Profile fields plus follow counters from the viewer's perspective."""

    profile = get_profile_by_username(db, username)
    stats = get_follow_stats(db, profile_id=profile.id, viewer_id=viewer_id)
    return {
        "profile": profile,
        "followers_count": stats.followers_count,
        "following_count": stats.following_count,
        "is_following": stats.is_following,
        "is_own": profile.id == viewer_id,
    }


def update_profile(db: Session, *, profile_id: UUID, payload: ProfileUpdateRequest) -> Profile:
    """Apply display-field updates for ``profile_id``. Badge and role fields are not writable here."""

    profile = db.get(Profile, profile_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

    # Only update fields that were actually sent by the client
    update_data = payload.model_dump(exclude_unset=True)

    if "display_name" in update_data:
        if not update_data["display_name"]:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Display name is required")
    if "bio" in update_data:
        update_data["bio"] = (update_data["bio"] or "").strip() or None
    if "avatar_url" in update_data:
        update_data["avatar_url"] = (update_data["avatar_url"] or "").strip() or None
    if update_data.get("is_private") is None:
        update_data.pop("is_private", None)

    for field, value in update_data.items():
        setattr(profile, field, value)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile",
        ) from exc

    db.refresh(profile)
    return profile


def set_avatar_url(db: Session, *, profile_id: UUID, avatar_url: str) -> Profile:
    profile = db.get(Profile, profile_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    profile.avatar_url = avatar_url
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update avatar") from exc
    return profile


def search_profiles(db: Session, *, query: str, viewer_id: UUID, limit: int = SEARCH_LIMIT) -> list[Profile]:
    """Match handle or display name, case-insensitively, excluding the viewer."""

    term = (query or "").strip().lower()
    if not term:
        return []
    pattern = f"%{term}%"
    stmt = (
        select(Profile)
        .where(
            Profile.id != viewer_id,
            or_(func.lower(Profile.username).like(pattern), func.lower(Profile.display_name).like(pattern)),
        )
        .order_by(Profile.username)
        .limit(max(1, min(limit, SEARCH_LIMIT)))
    )
    return list(db.scalars(stmt))


__all__ = [
    "SEARCH_LIMIT",
    "get_profile_by_username",
    "get_profile_detail",
    "update_profile",
    "set_avatar_url",
    "search_profiles",
]
