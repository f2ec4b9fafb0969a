"""Schemas for user reports."""
from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .common import UTCDateTime
from .profiles import ActorSummary


ReportContentType = Literal["post", "story", "note", "message", "profile"]
ReportStatus = Literal["pending", "reviewed", "dismissed"]


class ReportCreateRequest(BaseModel):
    content_type: ReportContentType
    content_id: UUID
    reason: str = Field(min_length=2, max_length=500)


class ReportCreateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    status: str
    created_at: UTCDateTime


class ModerationReportSummary(BaseModel):
    id: UUID
    status: str
    created_at: UTCDateTime
    content_type: str
    content_id: UUID
    reason: str
    reporter: ActorSummary | None = None


class ModerationReportList(BaseModel):
    total: int
    items: list[ModerationReportSummary]


class ModerationReportResolveRequest(BaseModel):
    status: Literal["reviewed", "dismissed"] = "reviewed"


__all__ = [
    "ReportContentType",
    "ReportStatus",
    "ReportCreateRequest",
    "ReportCreateResponse",
    "ModerationReportSummary",
    "ModerationReportList",
    "ModerationReportResolveRequest",
]
