"""Photo feed: posts, likes, saves and comments."""
from __future__ import annotations

from datetime import datetime, timedelta

from chatapp.models import Notification

from conftest import auth_headers

PHOTO = {"media_url": "https://cdn.example.test/posts/1.jpg", "caption": "  sunset  "}


def _create_post(client, profile) -> str:
    response = client.post("/posts", json=PHOTO, headers=auth_headers(profile))
    assert response.status_code == 201
    return response.json()["id"]


def test_create_post_and_read_it_back(client, profile_factory):
    author = profile_factory("author")
    post_id = _create_post(client, author)

    post = client.get(f"/posts/{post_id}", headers=auth_headers(author)).json()
    assert post["caption"] == "sunset"
    assert post["author"]["username"] == "author"
    assert post["likes_count"] == 0

    # Timestamps carry an explicit UTC offset whatever the database returns
    created_at = datetime.fromisoformat(post["created_at"].replace("Z", "+00:00"))
    assert created_at.utcoffset() == timedelta(0)


def test_like_and_save_toggle(client, db, profile_factory):
    author = profile_factory("author")
    fan = profile_factory("fan")
    post_id = _create_post(client, author)

    assert client.post(f"/posts/{post_id}/like", headers=auth_headers(fan)).json() == {"liked": True, "likes_count": 1}
    assert client.post(f"/posts/{post_id}/like", headers=auth_headers(fan)).json() == {"liked": False, "likes_count": 0}
    client.post(f"/posts/{post_id}/like", headers=auth_headers(fan))

    likers = client.get(f"/posts/{post_id}/likes", headers=auth_headers(author)).json()["items"]
    assert [liker["username"] for liker in likers] == ["fan"]

    assert client.post(f"/posts/{post_id}/save", headers=auth_headers(fan)).json() == {"saved": True}
    saved = client.get("/posts/saved", headers=auth_headers(fan)).json()["items"]
    assert [item["id"] for item in saved] == [post_id]
    assert saved[0]["is_liked"] is True

    types = sorted(notification.type for notification in db.query(Notification).all())
    assert types == ["like", "like"]


def test_comments_are_listed_oldest_first(client, profile_factory):
    author = profile_factory("author")
    fan = profile_factory("fan")
    post_id = _create_post(client, author)

    for text in ("first", "second"):
        response = client.post(f"/posts/{post_id}/comments", json={"content": text}, headers=auth_headers(fan))
        assert response.status_code == 201

    comments = client.get(f"/posts/{post_id}/comments", headers=auth_headers(author)).json()["items"]
    assert [comment["content"] for comment in comments] == ["first", "second"]
    assert client.get(f"/posts/{post_id}", headers=auth_headers(fan)).json()["comments_count"] == 2


def test_private_posts_are_hidden_from_non_followers(client, profile_factory, follow):
    author = profile_factory("author", is_private=True)
    stranger = profile_factory("stranger")
    fan = profile_factory("fan")
    follow(fan.id, author.id)
    post_id = _create_post(client, author)

    assert client.get(f"/posts/{post_id}", headers=auth_headers(stranger)).status_code == 404
    assert client.get("/posts/feed", headers=auth_headers(stranger)).json()["items"] == []
    assert len(client.get("/posts/feed", headers=auth_headers(fan)).json()["items"]) == 1


def test_only_author_or_admin_can_delete(client, profile_factory):
    author = profile_factory("author")
    other = profile_factory("other")
    admin = profile_factory("admin", admin=True)
    first = _create_post(client, author)
    second = _create_post(client, author)

    assert client.delete(f"/posts/{first}", headers=auth_headers(other)).status_code == 403
    assert client.delete(f"/posts/{first}", headers=auth_headers(author)).status_code == 204
    assert client.delete(f"/posts/{second}", headers=auth_headers(admin)).status_code == 204


def test_saved_posts_list_only_the_viewers_saves(client, profile_factory):
    author = profile_factory("author")
    fan = profile_factory("fan")
    other = profile_factory("other")
    kept = _create_post(client, author)
    dropped = _create_post(client, author)

    client.post(f"/posts/{kept}/save", headers=auth_headers(fan))
    client.post(f"/posts/{dropped}/save", headers=auth_headers(fan))
    client.post(f"/posts/{dropped}/save", headers=auth_headers(other))
    assert client.post(f"/posts/{dropped}/save", headers=auth_headers(fan)).json() == {"saved": False}

    response = client.get("/posts/saved", headers=auth_headers(fan))
    assert response.status_code == 200
    saved = response.json()["items"]
    assert [item["id"] for item in saved] == [kept]
    assert saved[0]["is_saved"] is True
    assert saved[0]["is_liked"] is False

    others = client.get("/posts/saved", headers=auth_headers(other)).json()["items"]
    assert [item["id"] for item in others] == [dropped]
