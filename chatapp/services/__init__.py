"""Convenience exports for service layer."""
from .auth_service import (
    ActorContext,
    authenticate,
    create_access_token,
    decode_access_token,
    exit_impersonation,
    get_actor_context,
    get_optional_context,
    impersonate,
    register_account,
    require_admin,
    resolve_actor_context,
)
from .conversation_service import (
    ConversationEntry,
    find_or_create,
    list_conversations,
    other_participant,
    require_participant,
    touch,
)
from .follow_service import (
    FollowStats,
    add_close_friend,
    follow_profile,
    get_follow_stats,
    list_close_friends,
    list_followers,
    list_following,
    remove_close_friend,
    unfollow_profile,
)
from .message_service import MessageEntry, list_messages, mark_read, send_message, unread_count
from .moderation_service import (
    PlatformStats,
    list_user_conversations,
    list_users,
    load_conversation_thread,
    load_platform_stats,
    set_badge,
)
from .note_service import (
    create_note,
    delete_note,
    get_my_note,
    list_active_notes,
    mark_note_seen,
    toggle_note_like,
)
from .notification_service import (
    NotificationType,
    count_unread_notifications,
    list_notifications,
    mark_all_read,
    notify,
)
from .notification_service import mark_read as mark_notification_read
from .post_service import (
    create_post_comment,
    create_post_record,
    delete_post_record,
    get_post_record,
    list_feed_records,
    list_post_comments,
    list_post_likers,
    list_saved_records,
    toggle_post_like,
    toggle_post_save,
)
from .profile_service import get_profile_detail, search_profiles, set_avatar_url, update_profile
from .report_service import create_report, list_reports, resolve_report
from .spaces_service import (
    SpacesConfigurationError,
    SpacesDeletionError,
    SpacesUploadError,
    delete_file_from_spaces,
    upload_file_to_spaces,
)
from .story_service import (
    create_story,
    delete_story,
    list_active_stories,
    list_story_viewers,
    mark_story_seen,
    reply_to_story,
    toggle_story_like,
)

__all__ = [
    "ActorContext",
    "authenticate",
    "create_access_token",
    "decode_access_token",
    "exit_impersonation",
    "get_actor_context",
    "get_optional_context",
    "impersonate",
    "register_account",
    "require_admin",
    "resolve_actor_context",
    "ConversationEntry",
    "find_or_create",
    "list_conversations",
    "other_participant",
    "require_participant",
    "touch",
    "FollowStats",
    "add_close_friend",
    "follow_profile",
    "get_follow_stats",
    "list_close_friends",
    "list_followers",
    "list_following",
    "remove_close_friend",
    "unfollow_profile",
    "MessageEntry",
    "list_messages",
    "mark_read",
    "send_message",
    "unread_count",
    "PlatformStats",
    "list_user_conversations",
    "list_users",
    "load_conversation_thread",
    "load_platform_stats",
    "set_badge",
    "create_note",
    "delete_note",
    "get_my_note",
    "list_active_notes",
    "mark_note_seen",
    "toggle_note_like",
    "NotificationType",
    "count_unread_notifications",
    "list_notifications",
    "mark_all_read",
    "mark_notification_read",
    "notify",
    "create_post_comment",
    "create_post_record",
    "delete_post_record",
    "get_post_record",
    "list_feed_records",
    "list_post_comments",
    "list_post_likers",
    "list_saved_records",
    "toggle_post_like",
    "toggle_post_save",
    "get_profile_detail",
    "search_profiles",
    "set_avatar_url",
    "update_profile",
    "create_report",
    "list_reports",
    "resolve_report",
    "SpacesConfigurationError",
    "SpacesDeletionError",
    "SpacesUploadError",
    "delete_file_from_spaces",
    "upload_file_to_spaces",
    "create_story",
    "delete_story",
    "list_active_stories",
    "list_story_viewers",
    "mark_story_seen",
    "reply_to_story",
    "toggle_story_like",
]
