"""SQLAlchemy ORM model for user-submitted reports."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from chatapp.database import Base
from .base import utcnow


class Report(Base):
    __tablename__ = "reports"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    reporter_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)

    # "post" | "story" | "note" | "message" | "profile"
    content_type = Column(String(16), nullable=False, index=True)
    content_id = Column(UUID(as_uuid=True), nullable=False, index=True)

    reason = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, server_default="pending", default="pending", index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)

    reporter = relationship("Profile")


__all__ = ["Report"]
