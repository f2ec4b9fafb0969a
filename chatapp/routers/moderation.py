"""Admin moderation endpoints."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_session
from ..schemas import (
    ActorPresence,
    ActorSummary,
    BadgeUpdateRequest,
    ConversationListResponse,
    ConversationSummary,
    MessageEntry,
    MessagePreview,
    MessageResponse,
    ModerationReportList,
    ModerationReportResolveRequest,
    ModerationReportSummary,
    ModerationStats,
    ModerationThreadResponse,
    ModerationUserList,
    ModerationUserSummary,
    ProfileResponse,
)
from ..services import (
    ActorContext,
    list_reports,
    list_user_conversations,
    list_users,
    load_conversation_thread,
    load_platform_stats,
    require_admin,
    resolve_report,
    set_badge,
)

router = APIRouter(prefix="/moderation", tags=["moderation"])


def _to_report_summary(report) -> ModerationReportSummary:
    return ModerationReportSummary(
        id=report.id,
        status=report.status,
        created_at=report.created_at,
        content_type=report.content_type,
        content_id=report.content_id,
        reason=report.reason,
        reporter=ActorSummary.model_validate(report.reporter) if report.reporter is not None else None,
    )


@router.get("/stats", response_model=ModerationStats)
async def moderation_stats_endpoint(
    db: Session = Depends(get_session),
    context: ActorContext = Depends(require_admin),
) -> ModerationStats:
    stats = load_platform_stats(db)
    return ModerationStats(
        total_profiles=stats.total_profiles,
        total_messages=stats.total_messages,
        total_conversations=stats.total_conversations,
        active_last_24h=stats.active_last_24h,
    )


@router.get("/users", response_model=ModerationUserList)
async def moderation_users_endpoint(
    skip: int = 0,
    limit: int = 25,
    search: str | None = None,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(require_admin),
) -> ModerationUserList:
    total, rows = list_users(db, skip=skip, limit=limit, search=search)
    items = [
        ModerationUserSummary(
            **ActorSummary.model_validate(profile).model_dump(),
            is_admin=is_admin,
            created_at=profile.created_at,
            last_seen=profile.last_seen,
        )
        for profile, is_admin in rows
    ]
    return ModerationUserList(total=total, items=items)


@router.get("/users/{profile_id}/conversations", response_model=ConversationListResponse)
async def moderation_user_conversations_endpoint(
    profile_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(require_admin),
) -> ConversationListResponse:
    entries = list_user_conversations(db, profile_id=profile_id, admin_id=context.real_actor.id)
    return ConversationListResponse(
        items=[
            ConversationSummary(
                id=entry.conversation.id,
                updated_at=entry.conversation.updated_at,
                participant=ActorPresence.model_validate(entry.participant),
                last_message=MessagePreview.model_validate(entry.last_message) if entry.last_message else None,
                unread_count=entry.unread_count,
            )
            for entry in entries
            if entry.participant is not None
        ]
    )


@router.get("/conversations/{conversation_id}/messages", response_model=ModerationThreadResponse)
async def moderation_conversation_messages_endpoint(
    conversation_id: UUID,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(require_admin),
) -> ModerationThreadResponse:
    members, entries = load_conversation_thread(db, conversation_id=conversation_id, admin_id=context.real_actor.id)
    return ModerationThreadResponse(
        conversation_id=conversation_id,
        participants=[ActorSummary.model_validate(member) for member in members],
        messages=[
            MessageEntry(
                message=MessageResponse.model_validate(entry.message),
                sender=ActorSummary.model_validate(entry.sender),
            )
            for entry in entries
        ],
    )


@router.put("/users/{profile_id}/badge", response_model=ProfileResponse)
async def moderation_badge_endpoint(
    profile_id: UUID,
    payload: BadgeUpdateRequest,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(require_admin),
) -> ProfileResponse:
    profile = set_badge(
        db,
        profile_id=profile_id,
        kind=payload.kind,
        label=payload.label,
        actor_id=context.real_actor.id,
    )
    return ProfileResponse.model_validate(profile)


@router.get("/reports", response_model=ModerationReportList)
async def moderation_reports_endpoint(
    skip: int = 0,
    limit: int = 25,
    status: str | None = "pending",
    db: Session = Depends(get_session),
    context: ActorContext = Depends(require_admin),
) -> ModerationReportList:
    total, reports = list_reports(db, skip=skip, limit=limit, status_filter=status)
    return ModerationReportList(total=total, items=[_to_report_summary(report) for report in reports])


@router.post("/reports/{report_id}/resolve", response_model=ModerationReportSummary)
async def moderation_report_resolve_endpoint(
    report_id: UUID,
    payload: ModerationReportResolveRequest,
    db: Session = Depends(get_session),
    context: ActorContext = Depends(require_admin),
) -> ModerationReportSummary:
    report = resolve_report(db, report_id=report_id, new_status=payload.status)
    return _to_report_summary(report)
