"""SQLAlchemy ORM model for application-level actor profiles."""
from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from chatapp.database import Base
from .base import TimestampMixin, utcnow


class Profile(TimestampMixin, Base):
    __tablename__ = "profiles"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    account_id = Column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    username = Column(String(20), unique=True, nullable=False, index=True)
    display_name = Column(String(50), nullable=False)
    avatar_url = Column(String(1024), nullable=True)
    bio = Column(Text, nullable=True)
    is_private = Column(Boolean, nullable=False, server_default=expression.false(), default=False)
    last_seen = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)
    is_verified = Column(Boolean, nullable=False, server_default=expression.false(), default=False)
    verified_type = Column(String(8), nullable=True)
    badge_text = Column(String(40), nullable=True)

    account = relationship("Account", back_populates="profile")


__all__ = ["Profile"]
