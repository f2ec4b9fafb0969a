"""SQLAlchemy ORM models for ephemeral stories and their per-viewer state."""
from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from chatapp.database import Base
from .base import ensure_aware, utcnow


class Story(Base):
    __tablename__ = "stories"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    profile_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    media_url = Column(String(2048), nullable=False)
    media_type = Column(String(8), nullable=False, server_default="image", default="image")
    is_close_friends_only = Column(Boolean, nullable=False, server_default=expression.false(), default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    author = relationship("Profile")
    views = relationship("StoryView", cascade="all, delete-orphan")
    likes = relationship("StoryLike", cascade="all, delete-orphan")
    comments = relationship("StoryComment", cascade="all, delete-orphan")

    __table_args__ = (CheckConstraint("media_type IN ('image', 'video')", name="ck_stories_media_type"),)

    def is_active(self, *, reference: datetime | None = None) -> bool:
        reference = reference or utcnow()
        return ensure_aware(reference) < ensure_aware(self.expires_at)


class StoryView(Base):
    __tablename__ = "story_views"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    story_id = Column(UUID(as_uuid=True), ForeignKey("stories.id", ondelete="CASCADE"), nullable=False, index=True)
    viewer_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    viewed_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)

    viewer = relationship("Profile")

    __table_args__ = (UniqueConstraint("story_id", "viewer_id", name="uq_story_views_story_viewer"),)


class StoryLike(Base):
    __tablename__ = "story_likes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    story_id = Column(UUID(as_uuid=True), ForeignKey("stories.id", ondelete="CASCADE"), nullable=False, index=True)
    profile_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("story_id", "profile_id", name="uq_story_likes_story_profile"),)


class StoryComment(Base):
    """A private reply to a story, visible to its author and the replier."""

    __tablename__ = "story_comments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    story_id = Column(UUID(as_uuid=True), ForeignKey("stories.id", ondelete="CASCADE"), nullable=False, index=True)
    profile_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)

    author = relationship("Profile")


__all__ = ["Story", "StoryView", "StoryLike", "StoryComment"]
