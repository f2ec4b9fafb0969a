"""SQLAlchemy ORM models for short-lived text notes."""
from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from chatapp.database import Base
from .base import ensure_aware, utcnow


class Note(Base):
    __tablename__ = "notes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    profile_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(String(60), nullable=False)
    music_track_name = Column(String(200), nullable=True)
    music_artist = Column(String(200), nullable=True)
    music_album_art = Column(String(2048), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    author = relationship("Profile")
    views = relationship("NoteView", cascade="all, delete-orphan")
    likes = relationship("NoteLike", cascade="all, delete-orphan")

    def is_active(self, *, reference: datetime | None = None) -> bool:
        reference = reference or utcnow()
        return ensure_aware(reference) < ensure_aware(self.expires_at)


class NoteView(Base):
    __tablename__ = "note_views"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    note_id = Column(UUID(as_uuid=True), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True)
    viewer_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    viewed_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)

    viewer = relationship("Profile")

    __table_args__ = (UniqueConstraint("note_id", "viewer_id", name="uq_note_views_note_viewer"),)


class NoteLike(Base):
    __tablename__ = "note_likes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    note_id = Column(UUID(as_uuid=True), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True)
    profile_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("note_id", "profile_id", name="uq_note_likes_note_profile"),)


__all__ = ["Note", "NoteView", "NoteLike"]
