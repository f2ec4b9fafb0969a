"""Aggregate router exports."""
from .auth import router as auth_router
from .conversations import router as conversations_router
from .follows import router as follows_router
from .moderation import router as moderation_router
from .notes import router as notes_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .profiles import router as profiles_router
from .reports import router as reports_router
from .stories import router as stories_router
from .system import router as system_router
from .uploads import router as uploads_router

__all__ = [
    "auth_router",
    "conversations_router",
    "follows_router",
    "moderation_router",
    "notes_router",
    "notifications_router",
    "posts_router",
    "profiles_router",
    "reports_router",
    "stories_router",
    "system_router",
    "uploads_router",
]
