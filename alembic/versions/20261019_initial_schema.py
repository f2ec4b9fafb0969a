"""initial messaging, stories, notes and feed schema

Revision ID: 20261019_initial_schema
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

# revision identifiers, used by Alembic.
revision = "20261019_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _id() -> sa.Column:
    return sa.Column("id", UUID(as_uuid=True), primary_key=True, nullable=False)


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def _profile_fk(name: str, *, nullable: bool = False) -> sa.Column:
    return sa.Column(name, UUID(as_uuid=True), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=nullable)


def upgrade() -> None:
    op.create_table(
        "accounts",
        _id(),
        sa.Column("login_email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        _created_at(),
    )
    op.create_index("ix_accounts_login_email", "accounts", ["login_email"], unique=True)

    op.create_table(
        "user_roles",
        _id(),
        sa.Column("account_id", UUID(as_uuid=True), sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False, server_default="user"),
        sa.UniqueConstraint("account_id", "role", name="uq_user_roles_account_role"),
    )
    op.create_index("ix_user_roles_account_id", "user_roles", ["account_id"])

    op.create_table(
        "profiles",
        _id(),
        sa.Column("account_id", UUID(as_uuid=True), sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("username", sa.String(length=20), nullable=False),
        sa.Column("display_name", sa.String(length=50), nullable=False),
        sa.Column("avatar_url", sa.String(length=1024)),
        sa.Column("bio", sa.Text()),
        sa.Column("is_private", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at("last_seen"),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verified_type", sa.String(length=8)),
        sa.Column("badge_text", sa.String(length=40)),
        _created_at(),
        _created_at("updated_at"),
    )
    op.create_index("ix_profiles_username", "profiles", ["username"], unique=True)

    for table, left, right, unique_name, check_name in (
        ("follows", "follower_id", "following_id", "uq_follows_pair", "ck_follows_no_self"),
        ("close_friends", "user_id", "friend_id", "uq_close_friends_pair", "ck_close_friends_no_self"),
    ):
        op.create_table(
            table,
            _id(),
            _profile_fk(left),
            _profile_fk(right),
            _created_at(),
            sa.UniqueConstraint(left, right, name=unique_name),
            sa.CheckConstraint(f"{left} <> {right}", name=check_name),
        )
        op.create_index(f"ix_{table}_{left}", table, [left])
        op.create_index(f"ix_{table}_{right}", table, [right])

    op.create_table("conversations", _id(), _created_at(), _created_at("updated_at"))
    op.create_table(
        "conversation_participants",
        _id(),
        sa.Column("conversation_id", UUID(as_uuid=True), sa.ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False),
        _profile_fk("profile_id"),
        sa.Column("last_read_at", sa.DateTime(timezone=True)),
        _created_at(),
        sa.UniqueConstraint("conversation_id", "profile_id", name="uq_conversation_participants_pair"),
    )
    op.create_index("ix_conversation_participants_conversation_id", "conversation_participants", ["conversation_id"])
    op.create_index("ix_conversation_participants_profile_id", "conversation_participants", ["profile_id"])

    op.create_table(
        "messages",
        _id(),
        sa.Column("conversation_id", UUID(as_uuid=True), sa.ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False),
        _profile_fk("sender_id"),
        sa.Column("content", sa.Text()),
        sa.Column("message_type", sa.String(length=8), nullable=False, server_default="text"),
        sa.Column("file_url", sa.String(length=2048)),
        sa.Column("file_name", sa.String(length=255)),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.CheckConstraint("message_type IN ('text', 'image', 'file')", name="ck_messages_type"),
    )
    op.create_index("ix_messages_conversation_id", "messages", ["conversation_id"])
    op.create_index("ix_messages_sender_id", "messages", ["sender_id"])

    op.create_table(
        "stories",
        _id(),
        _profile_fk("profile_id"),
        sa.Column("media_url", sa.String(length=2048), nullable=False),
        sa.Column("media_type", sa.String(length=8), nullable=False, server_default="image"),
        sa.Column("is_close_friends_only", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("media_type IN ('image', 'video')", name="ck_stories_media_type"),
    )
    op.create_index("ix_stories_profile_id", "stories", ["profile_id"])
    op.create_index("ix_stories_expires_at", "stories", ["expires_at"])

    op.create_table(
        "notes",
        _id(),
        _profile_fk("profile_id"),
        sa.Column("content", sa.String(length=60), nullable=False),
        sa.Column("music_track_name", sa.String(length=200)),
        sa.Column("music_artist", sa.String(length=200)),
        sa.Column("music_album_art", sa.String(length=2048)),
        _created_at(),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_notes_profile_id", "notes", ["profile_id"])
    op.create_index("ix_notes_expires_at", "notes", ["expires_at"])

    for parent in ("story", "note"):
        views = f"{parent}_views"
        op.create_table(
            views,
            _id(),
            sa.Column(f"{parent}_id", UUID(as_uuid=True), sa.ForeignKey(f"{parent}s.id", ondelete="CASCADE"), nullable=False),
            _profile_fk("viewer_id"),
            _created_at("viewed_at"),
            sa.UniqueConstraint(f"{parent}_id", "viewer_id", name=f"uq_{views}_{parent}_viewer"),
        )
        op.create_index(f"ix_{views}_{parent}_id", views, [f"{parent}_id"])
        op.create_index(f"ix_{views}_viewer_id", views, ["viewer_id"])

        likes = f"{parent}_likes"
        op.create_table(
            likes,
            _id(),
            sa.Column(f"{parent}_id", UUID(as_uuid=True), sa.ForeignKey(f"{parent}s.id", ondelete="CASCADE"), nullable=False),
            _profile_fk("profile_id"),
            _created_at(),
            sa.UniqueConstraint(f"{parent}_id", "profile_id", name=f"uq_{likes}_{parent}_profile"),
        )
        op.create_index(f"ix_{likes}_{parent}_id", likes, [f"{parent}_id"])
        op.create_index(f"ix_{likes}_profile_id", likes, ["profile_id"])

    op.create_table(
        "story_comments",
        _id(),
        sa.Column("story_id", UUID(as_uuid=True), sa.ForeignKey("stories.id", ondelete="CASCADE"), nullable=False),
        _profile_fk("profile_id"),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_story_comments_story_id", "story_comments", ["story_id"])
    op.create_index("ix_story_comments_profile_id", "story_comments", ["profile_id"])

    op.create_table(
        "posts",
        _id(),
        _profile_fk("profile_id"),
        sa.Column("caption", sa.Text()),
        sa.Column("media_url", sa.String(length=2048), nullable=False),
        sa.Column("media_type", sa.String(length=8), nullable=False, server_default="image"),
        _created_at(),
        _created_at("updated_at"),
    )
    op.create_index("ix_posts_profile_id", "posts", ["profile_id"])

    for table, unique_name in (("post_likes", "uq_post_likes_post_profile"), ("post_saves", "uq_post_saves_post_profile")):
        op.create_table(
            table,
            _id(),
            sa.Column("post_id", UUID(as_uuid=True), sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
            _profile_fk("profile_id"),
            _created_at(),
            sa.UniqueConstraint("post_id", "profile_id", name=unique_name),
        )
        op.create_index(f"ix_{table}_post_id", table, ["post_id"])
        op.create_index(f"ix_{table}_profile_id", table, ["profile_id"])

    op.create_table(
        "post_comments",
        _id(),
        sa.Column("post_id", UUID(as_uuid=True), sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        _profile_fk("profile_id"),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_post_comments_post_id", "post_comments", ["post_id"])
    op.create_index("ix_post_comments_profile_id", "post_comments", ["profile_id"])

    op.create_table(
        "notifications",
        _id(),
        _profile_fk("profile_id"),
        sa.Column("type", sa.String(length=32), nullable=False),
        _profile_fk("actor_id", nullable=True),
        sa.Column("content_type", sa.String(length=16)),
        sa.Column("content_id", UUID(as_uuid=True)),
        sa.Column("message", sa.Text()),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
    )
    op.create_index("ix_notifications_profile_id", "notifications", ["profile_id"])
    op.create_index("ix_notifications_actor_id", "notifications", ["actor_id"])

    op.create_table(
        "reports",
        _id(),
        _profile_fk("reporter_id"),
        sa.Column("content_type", sa.String(length=16), nullable=False),
        sa.Column("content_id", UUID(as_uuid=True), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        _created_at(),
    )
    op.create_index("ix_reports_reporter_id", "reports", ["reporter_id"])
    op.create_index("ix_reports_content_type", "reports", ["content_type"])
    op.create_index("ix_reports_content_id", "reports", ["content_id"])
    op.create_index("ix_reports_status", "reports", ["status"])


def downgrade() -> None:
    for table in (
        "reports",
        "notifications",
        "post_comments",
        "post_saves",
        "post_likes",
        "posts",
        "story_comments",
        "note_likes",
        "note_views",
        "story_likes",
        "story_views",
        "notes",
        "stories",
        "messages",
        "conversation_participants",
        "conversations",
        "close_friends",
        "follows",
        "profiles",
        "user_roles",
        "accounts",
    ):
        op.drop_table(table)
