"""Convenience exports for ORM models."""
from .account import Account, UserRole
from .conversation import Conversation, ConversationParticipant
from .message import Message
from .note import Note, NoteLike, NoteView
from .notification import Notification
from .post import Post, PostComment, PostLike, PostSave
from .profile import Profile
from .relationship import CloseFriend, Follow
from .report import Report
from .story import Story, StoryComment, StoryLike, StoryView

__all__ = [
    "Account",
    "UserRole",
    "Profile",
    "Follow",
    "CloseFriend",
    "Conversation",
    "ConversationParticipant",
    "Message",
    "Story",
    "StoryView",
    "StoryLike",
    "StoryComment",
    "Note",
    "NoteView",
    "NoteLike",
    "Post",
    "PostLike",
    "PostComment",
    "PostSave",
    "Notification",
    "Report",
]
