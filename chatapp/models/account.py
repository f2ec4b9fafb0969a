"""SQLAlchemy ORM models for authentication identities and role membership."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from chatapp.database import Base
from .base import utcnow


class Account(Base):
    """The raw authentication identity a session token is bound to."""

    __tablename__ = "accounts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    login_email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)

    profile = relationship("Profile", back_populates="account", uselist=False, cascade="all, delete-orphan")
    roles = relationship("UserRole", back_populates="account", cascade="all, delete-orphan")


class UserRole(Base):
    """Role membership, kept apart from profiles so a profile update cannot grant a role."""

    __tablename__ = "user_roles"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    account_id = Column(UUID(as_uuid=True), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(16), nullable=False, server_default="user", default="user")

    account = relationship("Account", back_populates="roles")

    __table_args__ = (UniqueConstraint("account_id", "role", name="uq_user_roles_account_role"),)


__all__ = ["Account", "UserRole"]
