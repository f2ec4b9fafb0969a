"""Convenience exports for schema layer."""
from .auth import AuthResponse, LoginRequest, RegisterRequest, SessionResponse
from .common import LikeStateResponse, SaveStateResponse
from .conversations import (
    ConversationCreate,
    ConversationListResponse,
    ConversationResolveResponse,
    ConversationSummary,
    MarkReadRequest,
    MarkReadResponse,
    MessageEntry,
    MessagePreview,
    MessageResponse,
    MessageSendRequest,
    MessageThreadResponse,
    UnreadCountResponse,
)
from .follow import (
    CloseFriendActionResponse,
    FollowActionResponse,
    FollowListResponse,
    FollowStatsResponse,
)
from .media import MediaUploadResponse
from .moderation import (
    BadgeUpdateRequest,
    ImpersonationRequest,
    ModerationStats,
    ModerationThreadResponse,
    ModerationUserList,
    ModerationUserSummary,
)
from .notes import NoteBucket, NoteCreate, NoteFeedResponse, NoteItem
from .notifications import (
    NotificationListResponse,
    NotificationMarkAllResponse,
    NotificationResponse,
    NotificationSummaryResponse,
)
from .posts import (
    PostCommentCreate,
    PostCommentListResponse,
    PostCommentResponse,
    PostCreate,
    PostFeedResponse,
    PostLikersResponse,
    PostResponse,
)
from .profiles import (
    ActorPresence,
    ActorSummary,
    ProfileDetailResponse,
    ProfileResponse,
    ProfileSearchResponse,
    ProfileUpdateRequest,
)
from .reports import (
    ModerationReportList,
    ModerationReportResolveRequest,
    ModerationReportSummary,
    ReportCreateRequest,
    ReportCreateResponse,
)
from .stories import (
    StoryBucket,
    StoryCreate,
    StoryFeedResponse,
    StoryItem,
    StoryReplyCreate,
    StoryReplyResponse,
    StoryViewerResponse,
    StoryViewersResponse,
)
from .system import ClientConfigResponse

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "SessionResponse",
    "LikeStateResponse",
    "SaveStateResponse",
    "ConversationCreate",
    "ConversationListResponse",
    "ConversationResolveResponse",
    "ConversationSummary",
    "MarkReadRequest",
    "MarkReadResponse",
    "MessageEntry",
    "MessagePreview",
    "MessageResponse",
    "MessageSendRequest",
    "MessageThreadResponse",
    "UnreadCountResponse",
    "CloseFriendActionResponse",
    "FollowActionResponse",
    "FollowListResponse",
    "FollowStatsResponse",
    "MediaUploadResponse",
    "BadgeUpdateRequest",
    "ImpersonationRequest",
    "ModerationStats",
    "ModerationUserList",
    "ModerationUserSummary",
    "ModerationThreadResponse",
    "NoteBucket",
    "NoteCreate",
    "NoteFeedResponse",
    "NoteItem",
    "NotificationListResponse",
    "NotificationMarkAllResponse",
    "NotificationResponse",
    "NotificationSummaryResponse",
    "PostCommentCreate",
    "PostCommentListResponse",
    "PostCommentResponse",
    "PostCreate",
    "PostFeedResponse",
    "PostLikersResponse",
    "PostResponse",
    "ActorPresence",
    "ActorSummary",
    "ProfileDetailResponse",
    "ProfileResponse",
    "ProfileSearchResponse",
    "ProfileUpdateRequest",
    "ModerationReportList",
    "ModerationReportResolveRequest",
    "ModerationReportSummary",
    "ReportCreateRequest",
    "ReportCreateResponse",
    "StoryBucket",
    "StoryCreate",
    "StoryFeedResponse",
    "StoryItem",
    "StoryReplyCreate",
    "StoryReplyResponse",
    "StoryViewerResponse",
    "StoryViewersResponse",
    "ClientConfigResponse",
]
