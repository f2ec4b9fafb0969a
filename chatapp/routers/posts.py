"""API routes for the photo feed."""
from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import PostComment
from ..schemas import (
    ActorSummary,
    LikeStateResponse,
    PostCommentCreate,
    PostCommentListResponse,
    PostCommentResponse,
    PostCreate,
    PostFeedResponse,
    PostLikersResponse,
    PostResponse,
    SaveStateResponse,
)
from ..services import (
    ActorContext,
    create_post_comment,
    create_post_record,
    delete_post_record,
    get_actor_context,
    get_post_record,
    list_feed_records,
    list_post_comments,
    list_post_likers,
    list_saved_records,
    toggle_post_like,
    toggle_post_save,
)

router = APIRouter(prefix="/posts", tags=["posts"])


def _to_post_response(record: dict[str, Any]) -> PostResponse:
    data = dict(record)
    data["author"] = ActorSummary.model_validate(record["author"])
    return PostResponse(**data)


def _to_comment_response(comment: PostComment) -> PostCommentResponse:
    return PostCommentResponse(
        id=comment.id,
        post_id=comment.post_id,
        author=ActorSummary.model_validate(comment.author),
        content=comment.content,
        created_at=comment.created_at,
    )


@router.get("/feed", response_model=PostFeedResponse)
async def list_feed(
    author_id: UUID | None = None,
    limit: int = Query(50, ge=1, le=100),
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> PostFeedResponse:
    records = list_feed_records(db, viewer_id=context.actor_id, author_id=author_id, limit=limit)
    return PostFeedResponse(items=[_to_post_response(record) for record in records])


@router.get("/saved", response_model=PostFeedResponse)
async def list_saved(
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> PostFeedResponse:
    records = list_saved_records(db, viewer_id=context.actor_id)
    return PostFeedResponse(items=[_to_post_response(record) for record in records])


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> PostResponse:
    post = create_post_record(db, author_id=context.actor_id, payload=payload)
    return _to_post_response(get_post_record(db, post_id=post.id, viewer_id=context.actor_id))


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> PostResponse:
    return _to_post_response(get_post_record(db, post_id=post_id, viewer_id=context.actor_id))


@router.post("/{post_id}/like", response_model=LikeStateResponse)
async def toggle_like(
    post_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> LikeStateResponse:
    liked, count = toggle_post_like(db, post_id=post_id, viewer_id=context.actor_id)
    return LikeStateResponse(liked=liked, likes_count=count)


@router.post("/{post_id}/save", response_model=SaveStateResponse)
async def toggle_save(
    post_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> SaveStateResponse:
    return SaveStateResponse(saved=toggle_post_save(db, post_id=post_id, viewer_id=context.actor_id))


@router.get("/{post_id}/likes", response_model=PostLikersResponse)
async def list_likers(
    post_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> PostLikersResponse:
    likers = list_post_likers(db, post_id=post_id, viewer_id=context.actor_id)
    return PostLikersResponse(post_id=post_id, items=[ActorSummary.model_validate(p) for p in likers])


@router.get("/{post_id}/comments", response_model=PostCommentListResponse)
async def list_comments(
    post_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> PostCommentListResponse:
    comments = list_post_comments(db, post_id=post_id, viewer_id=context.actor_id)
    return PostCommentListResponse(items=[_to_comment_response(comment) for comment in comments])


@router.post("/{post_id}/comments", response_model=PostCommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    post_id: UUID,
    payload: PostCommentCreate,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> PostCommentResponse:
    comment = create_post_comment(db, post_id=post_id, author_id=context.actor_id, content=payload.content)
    return _to_comment_response(comment)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> Response:
    delete_post_record(db, post_id=post_id, actor_id=context.actor_id, is_admin=context.is_admin)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
