"""SQLAlchemy ORM model for notifications."""
from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from chatapp.database import Base
from .base import utcnow


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    profile_id = Column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = Column(String(32), nullable=False)
    actor_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=True, index=True)
    content_type = Column(String(16), nullable=True)
    content_id = Column(UUID(as_uuid=True), nullable=True)
    message = Column(Text, nullable=True)
    is_read = Column(Boolean, nullable=False, server_default=expression.false(), default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)

    recipient = relationship("Profile", foreign_keys=[profile_id])
    actor = relationship("Profile", foreign_keys=[actor_id])


__all__ = ["Notification"]
