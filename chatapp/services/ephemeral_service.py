"""Shared engine for time-boxed content (stories and notes).

Expiry is evaluated on every read (``expires_at > now``); rows past their
expiry stay in the database but are never returned or addressable. Each
kind is described by an :class:`EphemeralKind` so the visibility, seen and
like rules are written once.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..models import Note, NoteLike, NoteView, Profile, Story, StoryLike, StoryView
from ..models.base import ensure_aware, utcnow
from ..security.policies import can_view_ephemeral, conceal, deny, is_owner
from .follow_service import close_friend_of_ids, following_ids, is_close_friend, is_following
from .notification_service import NotificationType, actor_label, notify

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EphemeralKind:
    name: str
    model: Any
    view_model: Any
    like_model: Any
    content_key: str
    close_friends_gated: bool = False

    @property
    def label(self) -> str:
        return self.name.capitalize()


STORY_KIND = EphemeralKind("story", Story, StoryView, StoryLike, "story_id", close_friends_gated=True)
NOTE_KIND = EphemeralKind("note", Note, NoteView, NoteLike, "note_id")


@dataclass(slots=True)
class EphemeralItem:
    content: Any
    seen: bool = False
    liked: bool = False
    likes_count: int = 0


@dataclass(slots=True)
class AuthorBucket:
    author: Profile
    items: list[EphemeralItem] = field(default_factory=list)
    is_close_friend: bool = False

    @property
    def has_unseen(self) -> bool:
        return any(not item.seen for item in self.items)

    @property
    def latest_at(self) -> datetime:
        return max(ensure_aware(item.content.created_at) for item in self.items)


def default_ttl() -> timedelta:
    return timedelta(hours=get_settings().ephemeral_ttl_hours)


def _is_close_friends_only(kind: EphemeralKind, content: Any) -> bool:
    return kind.close_friends_gated and bool(getattr(content, "is_close_friends_only", False))


def create(
    db: Session,
    kind: EphemeralKind,
    *,
    author_id: UUID,
    now: datetime | None = None,
    ttl: timedelta | None = None,
    **fields: Any,
) -> Any:
    """Insert a new item that expires ``ttl`` after ``now``."""

    created_at = now or utcnow()
    content = kind.model(
        profile_id=author_id,
        created_at=created_at,
        expires_at=created_at + (ttl or default_ttl()),
        **fields,
    )
    try:
        db.add(content)
        db.commit()
        db.refresh(content)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create %s for profile %s", kind.name, author_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Unable to create {kind.name}",
        ) from exc
    return content


def is_visible_to(db: Session, kind: EphemeralKind, content: Any, viewer_id: UUID) -> bool:
    author: Profile = content.author
    if author.id == viewer_id:
        return True
    return can_view_ephemeral(
        author_id=author.id,
        viewer_id=viewer_id,
        author_is_private=bool(author.is_private),
        viewer_follows_author=is_following(db, viewer_id, author.id),
        viewer_is_close_friend=is_close_friend(db, author.id, viewer_id),
        close_friends_only=_is_close_friends_only(kind, content),
    )


def get_visible_or_404(
    db: Session,
    kind: EphemeralKind,
    content_id: UUID,
    viewer_id: UUID,
    *,
    now: datetime | None = None,
) -> Any:
    """Load a single item, answering 404 when it is missing, expired or hidden from the viewer."""

    content = db.get(kind.model, content_id)
    not_found = f"{kind.label} not found"
    if content is None or not content.is_active(reference=now):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
    if not is_visible_to(db, kind, content, viewer_id):
        conceal(viewer_id, f"{kind.name}.view", content_id, detail=not_found)
    return content


def _ids_for(db: Session, model: Any, key: str, content_ids: list[UUID], *, profile_column: str, profile_id: UUID) -> set[UUID]:
    column = getattr(model, key)
    stmt = select(column).where(column.in_(content_ids), getattr(model, profile_column) == profile_id)
    return set(db.scalars(stmt))


def _like_counts(db: Session, kind: EphemeralKind, content_ids: list[UUID]) -> dict[UUID, int]:
    if not content_ids:
        return {}
    column = getattr(kind.like_model, kind.content_key)
    stmt = select(column, func.count()).where(column.in_(content_ids)).group_by(column)
    return {content_id: int(count) for content_id, count in db.execute(stmt)}


def likes_count(db: Session, kind: EphemeralKind, content_id: UUID) -> int:
    return _like_counts(db, kind, [content_id]).get(content_id, 0)


def _bucket_sort_key(bucket: AuthorBucket) -> tuple[bool, float, str]:
    return (not bucket.has_unseen, -bucket.latest_at.timestamp(), str(bucket.author.id))


def list_visible(db: Session, kind: EphemeralKind, *, viewer_id: UUID, now: datetime | None = None) -> list[AuthorBucket]:
    """Active items the viewer may see, grouped by author.

    Buckets holding anything the viewer has not seen come first, then buckets
    by their most recent item, newest first, then by author id.
    """

    reference = now or utcnow()
    following = following_ids(db, viewer_id)
    close_friend_of = close_friend_of_ids(db, viewer_id)

    stmt = (
        select(kind.model, Profile)
        .join(Profile, Profile.id == kind.model.profile_id)
        .where(kind.model.expires_at > reference)
        .where(
            (kind.model.profile_id == viewer_id)
            | Profile.is_private.is_(False)
            | kind.model.profile_id.in_(list(following or {viewer_id}))
        )
        .order_by(kind.model.created_at.desc(), kind.model.id)
    )

    visible: list[tuple[Any, Profile]] = []
    for content, author in db.execute(stmt).all():
        allowed = can_view_ephemeral(
            author_id=author.id,
            viewer_id=viewer_id,
            author_is_private=bool(author.is_private),
            viewer_follows_author=author.id in following,
            viewer_is_close_friend=author.id in close_friend_of,
            close_friends_only=_is_close_friends_only(kind, content),
        )
        if allowed:
            visible.append((content, author))

    content_ids = [content.id for content, _ in visible]
    seen_ids: set[UUID] = set()
    liked_ids: set[UUID] = set()
    if content_ids:
        seen_ids = _ids_for(db, kind.view_model, kind.content_key, content_ids, profile_column="viewer_id", profile_id=viewer_id)
        liked_ids = _ids_for(db, kind.like_model, kind.content_key, content_ids, profile_column="profile_id", profile_id=viewer_id)
    counts = _like_counts(db, kind, content_ids)

    buckets: dict[UUID, AuthorBucket] = {}
    for content, author in visible:
        bucket = buckets.get(author.id)
        if bucket is None:
            bucket = AuthorBucket(author=author, is_close_friend=author.id in close_friend_of)
            buckets[author.id] = bucket
        bucket.items.append(
            EphemeralItem(
                content=content,
                seen=author.id == viewer_id or content.id in seen_ids,
                liked=content.id in liked_ids,
                likes_count=counts.get(content.id, 0),
            )
        )

    for bucket in buckets.values():
        bucket.items.sort(key=lambda item: (ensure_aware(item.content.created_at), str(item.content.id)))
    return sorted(buckets.values(), key=_bucket_sort_key)


def mark_seen(
    db: Session,
    kind: EphemeralKind,
    *,
    content_id: UUID,
    viewer_id: UUID,
    now: datetime | None = None,
) -> bool:
    """Record that the viewer has seen an item. Repeat calls and own items change nothing."""

    content = get_visible_or_404(db, kind, content_id, viewer_id, now=now)
    if content.profile_id == viewer_id:
        return False

    view_model = kind.view_model
    existing = db.scalar(
        select(view_model.id).where(
            getattr(view_model, kind.content_key) == content_id,
            view_model.viewer_id == viewer_id,
        )
    )
    if existing is not None:
        return False

    db.add(view_model(**{kind.content_key: content_id, "viewer_id": viewer_id}))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to record view") from exc
    return True


def toggle_like(
    db: Session,
    kind: EphemeralKind,
    *,
    content_id: UUID,
    viewer_id: UUID,
    now: datetime | None = None,
) -> tuple[bool, int]:
    """Flip the viewer's like on an item, returning ``(liked, likes_count)``.

    The author is notified when the item goes from unliked to liked, unless
    they liked it themselves.
    """

    content = get_visible_or_404(db, kind, content_id, viewer_id, now=now)
    like_model = kind.like_model
    existing = db.scalar(
        select(like_model).where(
            getattr(like_model, kind.content_key) == content_id,
            like_model.profile_id == viewer_id,
        )
    )

    liked_now = False
    try:
        if existing is not None:
            db.delete(existing)
        else:
            db.add(like_model(**{kind.content_key: content_id, "profile_id": viewer_id}))
            liked_now = True
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.debug("Concurrent like on %s %s by %s", kind.name, content_id, viewer_id)
        return True, likes_count(db, kind, content_id)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to update like") from exc

    if liked_now and content.profile_id != viewer_id:
        viewer = db.get(Profile, viewer_id)
        notify(
            db,
            recipient_id=content.profile_id,
            actor_id=viewer_id,
            type_=NotificationType.LIKE,
            content_type=kind.name,
            content_id=content_id,
            message=f"{actor_label(viewer)} liked your {kind.name}",
        )
    return liked_now, likes_count(db, kind, content_id)


def delete_own(db: Session, kind: EphemeralKind, *, content_id: UUID, actor_id: UUID) -> None:
    content = db.get(kind.model, content_id)
    if content is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{kind.label} not found")
    if not is_owner(content.profile_id, actor_id):
        deny(actor_id, f"{kind.name}.delete", content_id)
    try:
        db.delete(content)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Unable to delete {kind.name}") from exc


def latest_own(db: Session, kind: EphemeralKind, *, author_id: UUID, now: datetime | None = None) -> Any | None:
    stmt = (
        select(kind.model)
        .where(kind.model.profile_id == author_id, kind.model.expires_at > (now or utcnow()))
        .order_by(kind.model.created_at.desc())
        .limit(1)
    )
    return db.scalar(stmt)


def list_viewers(
    db: Session,
    kind: EphemeralKind,
    *,
    content_id: UUID,
    owner_id: UUID,
    now: datetime | None = None,
) -> list[Any]:
    """View rows for an active item, newest first. Only the author may ask."""

    content = db.get(kind.model, content_id)
    if content is None or not content.is_active(reference=now):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{kind.label} not found")
    if not is_owner(content.profile_id, owner_id):
        deny(owner_id, f"{kind.name}.viewers", content_id)
    view_model = kind.view_model
    stmt = (
        select(view_model)
        .where(getattr(view_model, kind.content_key) == content_id)
        .order_by(view_model.viewed_at.desc())
    )
    return list(db.scalars(stmt))


__all__ = [
    "EphemeralKind",
    "EphemeralItem",
    "AuthorBucket",
    "STORY_KIND",
    "NOTE_KIND",
    "default_ttl",
    "create",
    "is_visible_to",
    "get_visible_or_404",
    "likes_count",
    "list_visible",
    "mark_seen",
    "toggle_like",
    "delete_own",
    "latest_own",
    "list_viewers",
]
