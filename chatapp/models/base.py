"""Utility mixins and time helpers shared across ORM models."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime
from sqlalchemy.sql import func


def utcnow() -> datetime:
    """Return a timezone-aware UTC timestamp."""

    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Attach UTC to naive timestamps read back from backends without timezone support."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class TimestampMixin:
    """Reusable timestamp columns with timezone-aware defaults."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )


__all__ = ["TimestampMixin", "utcnow", "ensure_aware"]
