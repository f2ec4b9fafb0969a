"""API routes for ephemeral stories."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import Story
from ..schemas import (
    ActorSummary,
    LikeStateResponse,
    StoryBucket,
    StoryCreate,
    StoryFeedResponse,
    StoryItem,
    StoryReplyCreate,
    StoryReplyResponse,
    StoryViewerResponse,
    StoryViewersResponse,
)
from ..services import (
    ActorContext,
    create_story,
    delete_story,
    get_actor_context,
    list_active_stories,
    list_story_viewers,
    mark_story_seen,
    reply_to_story,
    toggle_story_like,
)
from ..services.ephemeral_service import EphemeralItem

router = APIRouter(prefix="/stories", tags=["stories"])


def _serialize_story(story: Story, *, seen: bool = False, liked: bool = False, likes_count: int = 0) -> StoryItem:
    return StoryItem(
        id=story.id,
        media_url=story.media_url,
        media_type=story.media_type,
        is_close_friends_only=story.is_close_friends_only,
        created_at=story.created_at,
        expires_at=story.expires_at,
        seen=seen,
        liked=liked,
        likes_count=likes_count,
    )


def _serialize_item(item: EphemeralItem) -> StoryItem:
    return _serialize_story(item.content, seen=item.seen, liked=item.liked, likes_count=item.likes_count)


@router.get("/feed", response_model=StoryFeedResponse)
async def list_story_feed(
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> StoryFeedResponse:
    buckets = [
        StoryBucket(
            author=ActorSummary.model_validate(bucket.author),
            stories=[_serialize_item(item) for item in bucket.items],
            has_unseen=bucket.has_unseen,
            is_close_friend=bucket.is_close_friend,
        )
        for bucket in list_active_stories(db, viewer_id=context.actor_id)
    ]
    return StoryFeedResponse(items=buckets)


@router.post("", response_model=StoryItem, status_code=status.HTTP_201_CREATED)
async def create_story_endpoint(
    payload: StoryCreate,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> StoryItem:
    story = create_story(db, author_id=context.actor_id, payload=payload)
    return _serialize_story(story, seen=True)


@router.post("/{story_id}/seen", status_code=status.HTTP_204_NO_CONTENT)
async def mark_story_seen_endpoint(
    story_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> Response:
    mark_story_seen(db, story_id=story_id, viewer_id=context.actor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{story_id}/like", response_model=LikeStateResponse)
async def toggle_story_like_endpoint(
    story_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> LikeStateResponse:
    liked, count = toggle_story_like(db, story_id=story_id, viewer_id=context.actor_id)
    return LikeStateResponse(liked=liked, likes_count=count)


@router.post("/{story_id}/replies", response_model=StoryReplyResponse, status_code=status.HTTP_201_CREATED)
async def reply_to_story_endpoint(
    story_id: UUID,
    payload: StoryReplyCreate,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> StoryReplyResponse:
    reply = reply_to_story(db, story_id=story_id, author_id=context.actor_id, content=payload.content)
    return StoryReplyResponse(
        id=reply.id,
        story_id=reply.story_id,
        author=ActorSummary.model_validate(reply.author),
        content=reply.content,
        created_at=reply.created_at,
    )


@router.get("/{story_id}/viewers", response_model=StoryViewersResponse)
async def list_story_viewers_endpoint(
    story_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> StoryViewersResponse:
    views = list_story_viewers(db, story_id=story_id, owner_id=context.actor_id)
    return StoryViewersResponse(
        story_id=story_id,
        items=[
            StoryViewerResponse(viewer=ActorSummary.model_validate(view.viewer), viewed_at=view.viewed_at)
            for view in views
        ],
    )


@router.delete("/{story_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_story_endpoint(
    story_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> Response:
    delete_story(db, story_id=story_id, actor_id=context.actor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
