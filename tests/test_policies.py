"""Unit tests for the authorization predicates."""
from __future__ import annotations

import logging
import uuid

import pytest
from fastapi import HTTPException

from chatapp.security.policies import (
    GENERIC_DENIAL_DETAIL,
    can_send_message,
    can_view_ephemeral,
    can_write_storage_key,
    conceal,
    deny,
    is_owner,
)

AUTHOR = uuid.uuid4()
VIEWER = uuid.uuid4()


def _visible(**overrides) -> bool:
    facts = {
        "author_id": AUTHOR,
        "viewer_id": VIEWER,
        "author_is_private": False,
        "viewer_follows_author": False,
        "viewer_is_close_friend": False,
        "close_friends_only": False,
    }
    facts.update(overrides)
    return can_view_ephemeral(**facts)


def test_public_content_is_visible_to_anyone():
    assert _visible() is True


def test_private_content_needs_a_follow():
    assert _visible(author_is_private=True) is False
    assert _visible(author_is_private=True, viewer_follows_author=True) is True


def test_close_friends_gate_applies_on_top_of_follow():
    assert _visible(close_friends_only=True, viewer_follows_author=True) is False
    assert _visible(close_friends_only=True, viewer_is_close_friend=True) is True


def test_authors_always_see_their_own_content():
    assert _visible(viewer_id=AUTHOR, author_is_private=True, close_friends_only=True) is True


def test_message_sender_must_be_participant():
    members = [AUTHOR, VIEWER]
    assert can_send_message(members, AUTHOR) is True
    assert can_send_message(members, VIEWER) is True
    assert can_send_message([VIEWER], AUTHOR) is False


def test_is_owner_rejects_missing_owner():
    assert is_owner(AUTHOR, AUTHOR) is True
    assert is_owner(None, AUTHOR) is False


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        (f"avatars/{AUTHOR}/avatar.png", True),
        (f"posts/{AUTHOR}/nested/photo.jpg", False),
        (f"avatars/{VIEWER}/avatar.png", False),
        (f"avatars/{AUTHOR}/", False),
        (f"avatars/{AUTHOR}", False),
    ],
)
def test_storage_keys_are_scoped_to_bucket_and_account(key, expected):
    assert can_write_storage_key(key, "avatars", AUTHOR) is expected


def test_deny_logs_and_raises_generic_403(caplog):
    with caplog.at_level(logging.WARNING, logger="chatapp.authz"):
        with pytest.raises(HTTPException) as excinfo:
            deny(VIEWER, "story.delete", AUTHOR)
    assert excinfo.value.status_code == 403
    assert excinfo.value.detail == GENERIC_DENIAL_DETAIL
    assert "story.delete" in caplog.text


def test_conceal_answers_not_found():
    with pytest.raises(HTTPException) as excinfo:
        conceal(VIEWER, "post.view", AUTHOR, detail="Post not found")
    assert excinfo.value.status_code == 404
    assert excinfo.value.detail == "Post not found"
