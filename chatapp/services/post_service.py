"""Business logic for posts and their likes, saves and comments."""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..models import Follow, Post, PostComment, PostLike, PostSave, Profile
from ..schemas import PostCreate
from ..security.policies import can_view_post, conceal, deny, is_owner
from .follow_service import is_following
from .notification_service import NotificationType, actor_label, notify

logger = logging.getLogger(__name__)


def create_post_record(db: Session, *, author_id: UUID, payload: PostCreate) -> Post:
    """Create and persist a new post for the given profile."""

    media_url = payload.media_url.strip()
    if not media_url:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A post needs media")
    caption = (payload.caption or "").strip() or None

    post = Post(profile_id=author_id, caption=caption, media_url=media_url, media_type=payload.media_type)
    try:
        db.add(post)
        db.commit()
        db.refresh(post)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create post for profile %s", author_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to create post") from exc
    return post


def _visible_clause(viewer_id: UUID):
    followed = select(Follow.following_id).where(Follow.follower_id == viewer_id)
    return or_(Post.profile_id == viewer_id, Profile.is_private.is_(False), Post.profile_id.in_(followed))


def _record_columns(viewer_id: UUID) -> list[Any]:
    like_count = (
        select(func.count(PostLike.id)).where(PostLike.post_id == Post.id).correlate(Post).scalar_subquery()
    )
    comment_count = (
        select(func.count(PostComment.id)).where(PostComment.post_id == Post.id).correlate(Post).scalar_subquery()
    )
    viewer_like = (
        select(func.count(PostLike.id))
        .where(PostLike.post_id == Post.id, PostLike.profile_id == viewer_id)
        .correlate(Post)
        .scalar_subquery()
    )
    viewer_save = (
        select(func.count(PostSave.id))
        .where(PostSave.post_id == Post.id, PostSave.profile_id == viewer_id)
        .correlate(Post)
        .scalar_subquery()
    )
    return [Post, Profile, like_count, comment_count, viewer_like, viewer_save]


def _to_record(row: Any) -> dict[str, Any]:
    post, author, like_count, comment_count, viewer_like, viewer_save = row
    return {
        "id": post.id,
        "author": author,
        "caption": post.caption,
        "media_url": post.media_url,
        "media_type": post.media_type,
        "created_at": post.created_at,
        "likes_count": int(like_count or 0),
        "comments_count": int(comment_count or 0),
        "is_liked": bool(viewer_like),
        "is_saved": bool(viewer_save),
    }


def list_feed_records(
    db: Session,
    *,
    viewer_id: UUID,
    author_id: UUID | None = None,
    limit: int = 50,
) -> list[dict[str, Any]]:
    """Posts the viewer may see, newest first, optionally limited to one author."""

    statement = (
        select(*_record_columns(viewer_id))
        .join(Profile, Post.profile_id == Profile.id)
        .where(_visible_clause(viewer_id))
    )
    if author_id is not None:
        statement = statement.where(Post.profile_id == author_id)
    statement = statement.order_by(Post.created_at.desc(), Post.id).limit(limit)
    return [_to_record(row) for row in db.execute(statement).all()]


def list_saved_records(db: Session, *, viewer_id: UUID) -> list[dict[str, Any]]:
    statement = (
        select(*_record_columns(viewer_id))
        .join(Profile, Post.profile_id == Profile.id)
        .join(PostSave, PostSave.post_id == Post.id)
        .where(PostSave.profile_id == viewer_id, _visible_clause(viewer_id))
        .order_by(PostSave.created_at.desc())
    )
    return [_to_record(row) for row in db.execute(statement).all()]


def get_post_record(db: Session, *, post_id: UUID, viewer_id: UUID) -> dict[str, Any]:
    get_visible_post_or_404(db, post_id, viewer_id)
    statement = (
        select(*_record_columns(viewer_id))
        .join(Profile, Post.profile_id == Profile.id)
        .where(Post.id == post_id)
    )
    return _to_record(db.execute(statement).one())


def get_visible_post_or_404(db: Session, post_id: UUID, viewer_id: UUID) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    author = post.author
    allowed = can_view_post(
        author_id=author.id,
        viewer_id=viewer_id,
        author_is_private=bool(author.is_private),
        viewer_follows_author=author.id != viewer_id and is_following(db, viewer_id, author.id),
    )
    if not allowed:
        conceal(viewer_id, "post.view", post_id, detail="Post not found")
    return post


def _likes_count(db: Session, post_id: UUID) -> int:
    return int(db.scalar(select(func.count(PostLike.id)).where(PostLike.post_id == post_id)) or 0)


def toggle_post_like(db: Session, *, post_id: UUID, viewer_id: UUID) -> tuple[bool, int]:
    post = get_visible_post_or_404(db, post_id, viewer_id)
    existing = db.scalar(select(PostLike).where(PostLike.post_id == post_id, PostLike.profile_id == viewer_id))

    liked = existing is None
    try:
        if existing is not None:
            db.delete(existing)
        else:
            db.add(PostLike(post_id=post_id, profile_id=viewer_id))
        db.commit()
    except IntegrityError:
        db.rollback()
        return True, _likes_count(db, post_id)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update like") from exc

    if liked:
        notify(
            db,
            recipient_id=post.profile_id,
            actor_id=viewer_id,
            type_=NotificationType.LIKE,
            content_type="post",
            content_id=post_id,
            message=f"{actor_label(db.get(Profile, viewer_id))} liked your post",
        )
    return liked, _likes_count(db, post_id)


def toggle_post_save(db: Session, *, post_id: UUID, viewer_id: UUID) -> bool:
    get_visible_post_or_404(db, post_id, viewer_id)
    existing = db.scalar(select(PostSave).where(PostSave.post_id == post_id, PostSave.profile_id == viewer_id))
    try:
        if existing is not None:
            db.delete(existing)
        else:
            db.add(PostSave(post_id=post_id, profile_id=viewer_id))
        db.commit()
    except IntegrityError:
        db.rollback()
        return True
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update saved posts") from exc
    return existing is None


def create_post_comment(db: Session, *, post_id: UUID, author_id: UUID, content: str) -> PostComment:
    post = get_visible_post_or_404(db, post_id, author_id)
    text = content.strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comment cannot be empty")

    comment = PostComment(post_id=post_id, profile_id=author_id, content=text)
    try:
        db.add(comment)
        db.commit()
        db.refresh(comment)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to add comment") from exc

    notify(
        db,
        recipient_id=post.profile_id,
        actor_id=author_id,
        type_=NotificationType.COMMENT,
        content_type="post",
        content_id=post_id,
        message=f"{actor_label(comment.author)} commented: {text[:80]}",
    )
    return comment


def list_post_comments(db: Session, *, post_id: UUID, viewer_id: UUID) -> list[PostComment]:
    get_visible_post_or_404(db, post_id, viewer_id)
    stmt = (
        select(PostComment)
        .options(selectinload(PostComment.author))
        .where(PostComment.post_id == post_id)
        .order_by(PostComment.created_at.asc(), PostComment.id)
    )
    return list(db.scalars(stmt))


def list_post_likers(db: Session, *, post_id: UUID, viewer_id: UUID) -> list[Profile]:
    get_visible_post_or_404(db, post_id, viewer_id)
    stmt = (
        select(Profile)
        .join(PostLike, PostLike.profile_id == Profile.id)
        .where(PostLike.post_id == post_id)
        .order_by(PostLike.created_at.desc())
    )
    return list(db.scalars(stmt))


def delete_post_record(db: Session, *, post_id: UUID, actor_id: UUID, is_admin: bool = False) -> None:
    post = db.get(Post, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    if not (is_owner(post.profile_id, actor_id) or is_admin):
        deny(actor_id, "post.delete", post_id)
    try:
        db.delete(post)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete post") from exc


__all__ = [
    "create_post_record",
    "list_feed_records",
    "list_saved_records",
    "get_post_record",
    "get_visible_post_or_404",
    "toggle_post_like",
    "toggle_post_save",
    "create_post_comment",
    "list_post_comments",
    "list_post_likers",
    "delete_post_record",
]
