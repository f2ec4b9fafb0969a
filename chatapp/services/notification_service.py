"""Notification helper logic.

Notifications are written after the primary action has been committed and in
their own transaction. A failed insert is logged and swallowed so the like,
comment or follow that triggered it stands on its own.
"""
from __future__ import annotations

import logging
from enum import StrEnum
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..models import Notification, Profile
from ..security.policies import deny, is_owner
from .realtime import profile_channels

logger = logging.getLogger(__name__)


class NotificationType(StrEnum):
    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"


def list_notifications(db: Session, profile_id: UUID, *, limit: int = 50) -> list[Notification]:
    """Return notifications for the supplied recipient ordered newest first."""

    stmt = (
        select(Notification)
        .options(selectinload(Notification.actor))
        .where(Notification.profile_id == profile_id)
        .order_by(Notification.created_at.desc(), Notification.id)
        .limit(limit)
    )
    return list(db.scalars(stmt))


def count_unread_notifications(db: Session, profile_id: UUID) -> int:
    stmt = (
        select(func.count())
        .select_from(Notification)
        .where(Notification.profile_id == profile_id, Notification.is_read.is_(False))
    )
    return int(db.scalar(stmt) or 0)


def notify(
    db: Session,
    *,
    recipient_id: UUID,
    actor_id: UUID,
    type_: NotificationType | str,
    content_type: str | None = None,
    content_id: UUID | None = None,
    message: str | None = None,
) -> Notification | None:
    """Best-effort insert of a notification. Self-notifications are skipped."""

    if recipient_id == actor_id:
        return None

    notification = Notification(
        profile_id=recipient_id,
        actor_id=actor_id,
        type=str(type_),
        content_type=content_type,
        content_id=content_id,
        message=message,
    )
    try:
        db.add(notification)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning(
            "Dropped %s notification for profile %s from %s",
            type_,
            recipient_id,
            actor_id,
            exc_info=True,
        )
        return None

    profile_channels.schedule(
        recipient_id,
        {"type": "notification.created", "notification_id": str(notification.id), "kind": str(type_)},
    )
    return notification


def actor_label(profile: Profile | None) -> str:
    if profile is None:
        return "Someone"
    return profile.display_name or profile.username


def mark_read(db: Session, *, notification_id: UUID, profile_id: UUID) -> Notification:
    notification = db.get(Notification, notification_id)
    if notification is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    if not is_owner(notification.profile_id, profile_id):
        deny(profile_id, "notification.read", notification_id)
    if notification.is_read:
        return notification
    notification.is_read = True
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to update notification") from exc
    return notification


def mark_all_read(db: Session, profile_id: UUID) -> int:
    """Mark all notifications for the given recipient as read."""

    stmt = (
        update(Notification)
        .where(Notification.profile_id == profile_id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to update notifications") from exc
    profile_channels.schedule(profile_id, {"type": "notification.read_all"})
    return int(result.rowcount or 0)


__all__ = [
    "NotificationType",
    "list_notifications",
    "count_unread_notifications",
    "notify",
    "actor_label",
    "mark_read",
    "mark_all_read",
]
