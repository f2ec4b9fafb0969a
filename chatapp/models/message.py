"""SQLAlchemy ORM model for conversation messages."""
from __future__ import annotations

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from chatapp.database import Base
from .base import utcnow


class Message(Base):
    __tablename__ = "messages"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    conversation_id = Column(
        UUID(as_uuid=True),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=True)
    message_type = Column(String(8), nullable=False, server_default="text", default="text")
    file_url = Column(String(2048), nullable=True)
    file_name = Column(String(255), nullable=True)
    is_read = Column(Boolean, nullable=False, server_default=expression.false(), default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)

    conversation = relationship("Conversation", back_populates="messages")
    sender = relationship("Profile")

    __table_args__ = (
        CheckConstraint("message_type IN ('text', 'image', 'file')", name="ck_messages_type"),
    )


__all__ = ["Message"]
