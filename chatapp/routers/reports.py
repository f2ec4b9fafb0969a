"""Report submission endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..schemas.reports import ReportCreateRequest, ReportCreateResponse
from ..services import ActorContext, create_report, get_actor_context

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", response_model=ReportCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_report_endpoint(
    payload: ReportCreateRequest,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> ReportCreateResponse:
    report = create_report(
        db,
        reporter_id=context.actor_id,
        content_type=payload.content_type,
        content_id=payload.content_id,
        reason=payload.reason,
    )
    return ReportCreateResponse.model_validate(report)


__all__ = ["router"]
