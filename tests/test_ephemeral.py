"""Stories and notes: expiry, visibility, seen state and likes."""
from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi import HTTPException

from chatapp.models import CloseFriend, Notification, StoryView
from chatapp.models.base import utcnow
from chatapp.schemas import NoteCreate, StoryCreate
from chatapp.services import (
    create_note,
    create_story,
    get_my_note,
    list_active_notes,
    list_active_stories,
    list_story_viewers,
    mark_story_seen,
    toggle_story_like,
)

from conftest import auth_headers

IMAGE = StoryCreate(media_url="https://cdn.example.test/stories/a.jpg")


def _authors(buckets) -> list[str]:
    return [bucket.author.username for bucket in buckets]


def test_story_visible_for_a_day_then_gone(db, profile_factory):
    author = profile_factory("author")
    viewer = profile_factory("viewer")
    base = utcnow()
    story = create_story(db, author_id=author.id, payload=IMAGE, now=base)

    assert _authors(list_active_stories(db, viewer_id=viewer.id, now=base + timedelta(hours=23))) == ["author"]
    assert list_active_stories(db, viewer_id=viewer.id, now=base + timedelta(hours=25)) == []

    # Expiry is exclusive at expires_at and applies to the author too
    assert list_active_stories(db, viewer_id=viewer.id, now=base + timedelta(hours=24)) == []
    assert list_active_stories(db, viewer_id=author.id, now=base + timedelta(hours=24)) == []

    with pytest.raises(HTTPException) as excinfo:
        mark_story_seen(db, story_id=story.id, viewer_id=viewer.id, now=base + timedelta(hours=25))
    assert excinfo.value.status_code == 404


def test_private_author_requires_follow(db, profile_factory, follow):
    author = profile_factory("hidden", is_private=True)
    stranger = profile_factory("stranger")
    fan = profile_factory("fan")
    follow(fan.id, author.id)
    story = create_story(db, author_id=author.id, payload=IMAGE)

    assert list_active_stories(db, viewer_id=stranger.id) == []
    assert _authors(list_active_stories(db, viewer_id=fan.id)) == ["hidden"]

    # Hidden content answers like missing content
    with pytest.raises(HTTPException) as excinfo:
        toggle_story_like(db, story_id=story.id, viewer_id=stranger.id)
    assert excinfo.value.status_code == 404


def test_close_friends_story_only_reaches_the_list(db, profile_factory, follow):
    author = profile_factory("author")
    inner = profile_factory("inner")
    outer = profile_factory("outer")
    follow(inner.id, author.id)
    follow(outer.id, author.id)
    db.add(CloseFriend(user_id=author.id, friend_id=inner.id))
    db.commit()

    create_story(
        db,
        author_id=author.id,
        payload=StoryCreate(media_url="https://cdn.example.test/cf.jpg", is_close_friends_only=True),
    )

    inner_buckets = list_active_stories(db, viewer_id=inner.id)
    assert _authors(inner_buckets) == ["author"]
    assert inner_buckets[0].is_close_friend is True
    assert list_active_stories(db, viewer_id=outer.id) == []
    assert _authors(list_active_stories(db, viewer_id=author.id)) == ["author"]


def test_mark_seen_is_idempotent_and_ignores_own_views(db, profile_factory):
    author = profile_factory("author")
    viewer = profile_factory("viewer")
    story = create_story(db, author_id=author.id, payload=IMAGE)

    assert mark_story_seen(db, story_id=story.id, viewer_id=viewer.id) is True
    assert mark_story_seen(db, story_id=story.id, viewer_id=viewer.id) is False
    assert mark_story_seen(db, story_id=story.id, viewer_id=author.id) is False
    assert db.query(StoryView).count() == 1

    viewers = list_story_viewers(db, story_id=story.id, owner_id=author.id)
    assert [view.viewer_id for view in viewers] == [viewer.id]
    with pytest.raises(HTTPException) as excinfo:
        list_story_viewers(db, story_id=story.id, owner_id=viewer.id)
    assert excinfo.value.status_code == 403


def test_like_toggle_is_symmetric_and_notifies_once(db, profile_factory):
    author = profile_factory("author")
    viewer = profile_factory("viewer")
    story = create_story(db, author_id=author.id, payload=IMAGE)

    assert toggle_story_like(db, story_id=story.id, viewer_id=viewer.id) == (True, 1)
    assert toggle_story_like(db, story_id=story.id, viewer_id=viewer.id) == (False, 0)
    assert toggle_story_like(db, story_id=story.id, viewer_id=author.id) == (True, 1)

    notifications = db.query(Notification).all()
    assert len(notifications) == 1
    assert notifications[0].profile_id == author.id
    assert notifications[0].type == "like"


def test_unseen_buckets_sort_first(db, profile_factory):
    viewer = profile_factory("viewer")
    early = profile_factory("early")
    late = profile_factory("late")
    base = utcnow()
    create_story(db, author_id=early.id, payload=IMAGE, now=base)
    late_story = create_story(db, author_id=late.id, payload=IMAGE, now=base + timedelta(minutes=10))
    reference = base + timedelta(minutes=20)

    assert _authors(list_active_stories(db, viewer_id=viewer.id, now=reference)) == ["late", "early"]

    mark_story_seen(db, story_id=late_story.id, viewer_id=viewer.id, now=reference)
    buckets = list_active_stories(db, viewer_id=viewer.id, now=reference)
    assert _authors(buckets) == ["early", "late"]
    assert [bucket.has_unseen for bucket in buckets] == [True, False]


def test_notes_expire_and_validate_length(db, profile_factory):
    author = profile_factory("author")
    viewer = profile_factory("viewer")
    base = utcnow()
    note = create_note(
        db,
        author_id=author.id,
        payload=NoteCreate(content="  listening on repeat  ", music_track_name="Track", music_artist="Band"),
        now=base,
    )
    assert note.content == "listening on repeat"
    assert note.music_artist == "Band"

    assert get_my_note(db, author_id=author.id, now=base + timedelta(hours=1)).id == note.id
    assert _authors(list_active_notes(db, viewer_id=viewer.id, now=base + timedelta(hours=23))) == ["author"]
    assert list_active_notes(db, viewer_id=viewer.id, now=base + timedelta(hours=25)) == []
    assert list_active_notes(db, viewer_id=viewer.id, now=base + timedelta(hours=24)) == []
    assert list_active_notes(db, viewer_id=author.id, now=base + timedelta(hours=24)) == []
    assert get_my_note(db, author_id=author.id, now=base + timedelta(hours=24)) is None

    with pytest.raises(HTTPException) as excinfo:
        create_note(db, author_id=author.id, payload=NoteCreate(content="   "))
    assert excinfo.value.status_code == 400


def test_story_routes_round_trip(client, profile_factory):
    author = profile_factory("author")
    viewer = profile_factory("viewer")

    created = client.post(
        "/stories",
        json={"media_url": "https://cdn.example.test/a.mp4", "media_type": "video"},
        headers=auth_headers(author),
    )
    assert created.status_code == 201
    story_id = created.json()["id"]

    feed = client.get("/stories/feed", headers=auth_headers(viewer)).json()["items"]
    assert feed[0]["author"]["username"] == "author"
    assert feed[0]["has_unseen"] is True
    expires_at = datetime.fromisoformat(feed[0]["stories"][0]["expires_at"].replace("Z", "+00:00"))
    assert expires_at.utcoffset() == timedelta(0)

    assert client.post(f"/stories/{story_id}/seen", headers=auth_headers(viewer)).status_code == 204
    liked = client.post(f"/stories/{story_id}/like", headers=auth_headers(viewer)).json()
    assert liked == {"liked": True, "likes_count": 1}
    reply = client.post(f"/stories/{story_id}/replies", json={"content": "nice"}, headers=auth_headers(viewer))
    assert reply.status_code == 201

    viewers = client.get(f"/stories/{story_id}/viewers", headers=auth_headers(author)).json()["items"]
    assert [item["viewer"]["username"] for item in viewers] == ["viewer"]

    assert client.delete(f"/stories/{story_id}", headers=auth_headers(viewer)).status_code == 403
    assert client.delete(f"/stories/{story_id}", headers=auth_headers(author)).status_code == 204
