"""Follower and close friend API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_session
from ..schemas import (
    ActorSummary,
    CloseFriendActionResponse,
    FollowActionResponse,
    FollowListResponse,
    FollowStatsResponse,
)
from ..services import (
    ActorContext,
    add_close_friend,
    follow_profile,
    get_actor_context,
    get_follow_stats,
    list_close_friends,
    list_followers,
    list_following,
    remove_close_friend,
    unfollow_profile,
)
from ..services.follow_service import get_profile_or_404

router = APIRouter(prefix="/follows", tags=["follows"])


def _action_response(db: Session, *, target_id: UUID, viewer_id: UUID, action: str) -> FollowActionResponse:
    stats = get_follow_stats(db, profile_id=target_id, viewer_id=viewer_id)
    return FollowActionResponse(
        profile_id=stats.profile_id,
        followers_count=stats.followers_count,
        following_count=stats.following_count,
        is_following=stats.is_following,
        status=action,
    )


@router.get("/close-friends", response_model=FollowListResponse)
async def list_close_friends_endpoint(
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> FollowListResponse:
    profiles = list_close_friends(db, context.actor_id)
    return FollowListResponse(items=[ActorSummary.model_validate(profile) for profile in profiles])


@router.post("/close-friends/{profile_id}", response_model=CloseFriendActionResponse)
async def add_close_friend_endpoint(
    profile_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> CloseFriendActionResponse:
    add_close_friend(db, owner_id=context.actor_id, friend_id=profile_id)
    return CloseFriendActionResponse(profile_id=profile_id, is_close_friend=True)


@router.delete("/close-friends/{profile_id}", response_model=CloseFriendActionResponse)
async def remove_close_friend_endpoint(
    profile_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> CloseFriendActionResponse:
    remove_close_friend(db, owner_id=context.actor_id, friend_id=profile_id)
    return CloseFriendActionResponse(profile_id=profile_id, is_close_friend=False)


@router.post("/{profile_id}", response_model=FollowActionResponse)
async def follow_profile_endpoint(
    profile_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> FollowActionResponse:
    created = follow_profile(db, follower_id=context.actor_id, target_id=profile_id)
    action = "followed" if created else "noop"
    return _action_response(db, target_id=profile_id, viewer_id=context.actor_id, action=action)


@router.delete("/{profile_id}", response_model=FollowActionResponse)
async def unfollow_profile_endpoint(
    profile_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> FollowActionResponse:
    removed = unfollow_profile(db, follower_id=context.actor_id, target_id=profile_id)
    action = "unfollowed" if removed else "noop"
    return _action_response(db, target_id=profile_id, viewer_id=context.actor_id, action=action)


@router.get("/{profile_id}/stats", response_model=FollowStatsResponse)
async def follow_stats_endpoint(
    profile_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> FollowStatsResponse:
    stats = get_follow_stats(db, profile_id=profile_id, viewer_id=context.actor_id)
    return FollowStatsResponse(
        profile_id=stats.profile_id,
        followers_count=stats.followers_count,
        following_count=stats.following_count,
        is_following=stats.is_following,
    )


@router.get("/{profile_id}/followers", response_model=FollowListResponse)
async def list_followers_endpoint(
    profile_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> FollowListResponse:
    get_profile_or_404(db, profile_id)
    return FollowListResponse(items=[ActorSummary.model_validate(p) for p in list_followers(db, profile_id)])


@router.get("/{profile_id}/following", response_model=FollowListResponse)
async def list_following_endpoint(
    profile_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> FollowListResponse:
    get_profile_or_404(db, profile_id)
    return FollowListResponse(items=[ActorSummary.model_validate(p) for p in list_following(db, profile_id)])
