"""Business logic for follower and close friend relationships."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import CloseFriend, Follow, Profile
from .notification_service import NotificationType, actor_label, notify

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FollowStats:
    profile_id: UUID
    followers_count: int
    following_count: int
    is_following: bool


def get_profile_or_404(db: Session, profile_id: UUID) -> Profile:
    profile = db.get(Profile, profile_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


def is_following(db: Session, follower_id: UUID, following_id: UUID) -> bool:
    return (
        db.scalar(
            select(Follow.id).where(Follow.follower_id == follower_id, Follow.following_id == following_id)
        )
        is not None
    )


def is_close_friend(db: Session, owner_id: UUID, friend_id: UUID) -> bool:
    """True when ``owner_id`` has granted ``friend_id`` close friend access."""

    return (
        db.scalar(select(CloseFriend.id).where(CloseFriend.user_id == owner_id, CloseFriend.friend_id == friend_id))
        is not None
    )


def following_ids(db: Session, viewer_id: UUID) -> set[UUID]:
    return set(db.scalars(select(Follow.following_id).where(Follow.follower_id == viewer_id)))


def close_friend_of_ids(db: Session, viewer_id: UUID) -> set[UUID]:
    """Authors who have the viewer on their close friends list."""

    return set(db.scalars(select(CloseFriend.user_id).where(CloseFriend.friend_id == viewer_id)))


def follow_profile(db: Session, *, follower_id: UUID, target_id: UUID) -> bool:
    if follower_id == target_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot follow yourself")

    get_profile_or_404(db, target_id)
    if is_following(db, follower_id, target_id):
        return False

    db.add(Follow(follower_id=follower_id, following_id=target_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to follow user") from exc

    follower = db.get(Profile, follower_id)
    notify(
        db,
        recipient_id=target_id,
        actor_id=follower_id,
        type_=NotificationType.FOLLOW,
        content_type="profile",
        content_id=follower_id,
        message=f"{actor_label(follower)} started following you",
    )
    return True


def unfollow_profile(db: Session, *, follower_id: UUID, target_id: UUID) -> bool:
    if follower_id == target_id:
        return False

    record = db.scalar(
        select(Follow).where(Follow.follower_id == follower_id, Follow.following_id == target_id)
    )
    if record is None:
        return False
    try:
        db.delete(record)
        db.commit()
        return True
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to unfollow user") from exc


def get_follow_stats(db: Session, *, profile_id: UUID, viewer_id: UUID | None = None) -> FollowStats:
    get_profile_or_404(db, profile_id)

    followers_count = db.scalar(
        select(func.count()).select_from(Follow).where(Follow.following_id == profile_id)
    ) or 0
    following_count = db.scalar(
        select(func.count()).select_from(Follow).where(Follow.follower_id == profile_id)
    ) or 0

    return FollowStats(
        profile_id=profile_id,
        followers_count=int(followers_count),
        following_count=int(following_count),
        is_following=viewer_id is not None and is_following(db, viewer_id, profile_id),
    )


def list_followers(db: Session, profile_id: UUID) -> list[Profile]:
    stmt = (
        select(Profile)
        .join(Follow, Follow.follower_id == Profile.id)
        .where(Follow.following_id == profile_id)
        .order_by(Follow.created_at.desc())
    )
    return list(db.scalars(stmt))


def list_following(db: Session, profile_id: UUID) -> list[Profile]:
    stmt = (
        select(Profile)
        .join(Follow, Follow.following_id == Profile.id)
        .where(Follow.follower_id == profile_id)
        .order_by(Follow.created_at.desc())
    )
    return list(db.scalars(stmt))


def add_close_friend(db: Session, *, owner_id: UUID, friend_id: UUID) -> bool:
    """Grant ``friend_id`` access to close-friends-only stories. The friend must already follow the owner."""

    if owner_id == friend_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot add yourself as a close friend")
    get_profile_or_404(db, friend_id)
    if not is_following(db, friend_id, owner_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only followers can be close friends")
    if is_close_friend(db, owner_id, friend_id):
        return False

    db.add(CloseFriend(user_id=owner_id, friend_id=friend_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to update close friends") from exc
    return True


def remove_close_friend(db: Session, *, owner_id: UUID, friend_id: UUID) -> bool:
    record = db.scalar(
        select(CloseFriend).where(CloseFriend.user_id == owner_id, CloseFriend.friend_id == friend_id)
    )
    if record is None:
        return False
    try:
        db.delete(record)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to update close friends") from exc
    return True


def list_close_friends(db: Session, owner_id: UUID) -> list[Profile]:
    stmt = (
        select(Profile)
        .join(CloseFriend, CloseFriend.friend_id == Profile.id)
        .where(CloseFriend.user_id == owner_id)
        .order_by(Profile.username)
    )
    return list(db.scalars(stmt))


__all__ = [
    "FollowStats",
    "get_profile_or_404",
    "is_following",
    "is_close_friend",
    "following_ids",
    "close_friend_of_ids",
    "follow_profile",
    "unfollow_profile",
    "get_follow_stats",
    "list_followers",
    "list_following",
    "add_close_friend",
    "remove_close_friend",
    "list_close_friends",
]
