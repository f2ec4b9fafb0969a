"""Project-wide constant values."""
from __future__ import annotations

import re

HANDLE_PATTERN = re.compile(r"^[A-Za-z0-9_]{3,20}$")

ROLE_ADMIN = "admin"
ROLE_USER = "user"

BADGE_KINDS = ("blue", "red", "gold")
BADGE_NONE = "none"

MESSAGE_KINDS = ("text", "image", "file")
STORY_MEDIA_TYPES = ("image", "video")

NOTE_MAX_LENGTH = 60

STORAGE_BUCKETS = ("avatars", "posts", "stories")

REPORTABLE_CONTENT_TYPES = ("post", "story", "note", "message", "profile")
REPORT_STATUSES = ("pending", "reviewed", "dismissed")


__all__ = [
    "HANDLE_PATTERN",
    "ROLE_ADMIN",
    "ROLE_USER",
    "BADGE_KINDS",
    "BADGE_NONE",
    "MESSAGE_KINDS",
    "STORY_MEDIA_TYPES",
    "NOTE_MAX_LENGTH",
    "STORAGE_BUCKETS",
    "REPORTABLE_CONTENT_TYPES",
    "REPORT_STATUSES",
]
