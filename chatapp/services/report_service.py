"""Services for creating and reviewing user reports."""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..constants import REPORT_STATUSES
from ..models import Message, Note, Post, Profile, Report, Story

logger = logging.getLogger(__name__)

_TARGET_MODELS: dict[str, Any] = {
    "post": Post,
    "story": Story,
    "note": Note,
    "message": Message,
    "profile": Profile,
}


def create_report(
    db: Session,
    *,
    reporter_id: UUID,
    content_type: str,
    content_id: UUID,
    reason: str,
) -> Report:
    safe_reason = (reason or "").strip()
    if len(safe_reason) < 2:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Reason is required")

    model = _TARGET_MODELS.get(content_type)
    if model is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid report target")
    if db.get(model, content_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{content_type.capitalize()} not found")

    existing = db.scalar(
        select(Report).where(
            Report.reporter_id == reporter_id,
            Report.content_type == content_type,
            Report.content_id == content_id,
            Report.status == "pending",
        )
    )
    report = existing or Report(reporter_id=reporter_id, content_type=content_type, content_id=content_id)
    report.reason = safe_reason
    try:
        db.add(report)
        db.commit()
        db.refresh(report)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to file report") from exc
    logger.info("Report %s filed on %s %s", report.id, content_type, content_id)
    return report


def list_reports(
    db: Session,
    *,
    skip: int = 0,
    limit: int = 25,
    status_filter: str | None = "pending",
) -> tuple[int, list[Report]]:
    safe_skip = max(0, int(skip or 0))
    safe_limit = max(1, min(int(limit or 25), 100))

    stmt = select(Report)
    count_stmt = select(func.count(Report.id))
    if status_filter:
        stmt = stmt.where(Report.status == status_filter)
        count_stmt = count_stmt.where(Report.status == status_filter)

    total = int(db.scalar(count_stmt) or 0)
    rows = db.scalars(
        stmt.options(selectinload(Report.reporter))
        .order_by(Report.created_at.desc(), Report.id)
        .offset(safe_skip)
        .limit(safe_limit)
    )
    return total, list(rows)


def resolve_report(db: Session, *, report_id: UUID, new_status: str = "reviewed") -> Report:
    if new_status not in REPORT_STATUSES or new_status == "pending":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid report status")
    report = db.get(Report, report_id)
    if not report:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")

    report.status = new_status
    try:
        db.commit()
        db.refresh(report)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to update report") from exc
    return report


__all__ = ["create_report", "list_reports", "resolve_report"]
