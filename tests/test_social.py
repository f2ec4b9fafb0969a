"""Profiles, follows, close friends and notifications."""
from __future__ import annotations

from conftest import auth_headers


def test_profile_search_and_detail(client, profile_factory, follow):
    ada = profile_factory("ada")
    profile_factory("adam")
    profile_factory("zed")
    follow(ada.id, profile_factory("bo").id)

    found = client.get("/profiles/search", params={"q": "AD"}, headers=auth_headers(ada)).json()["items"]
    assert [item["username"] for item in found] == ["adam"]

    detail = client.get("/profiles/ada", headers=auth_headers(ada)).json()
    assert detail["is_own"] is True
    assert detail["following_count"] == 1
    assert client.get("/profiles/nobody", headers=auth_headers(ada)).status_code == 404


def test_update_profile_fields(client, profile_factory):
    ada = profile_factory("ada")
    response = client.patch(
        "/profiles/me",
        json={"display_name": "  Ada L  ", "bio": "math", "is_private": True},
        headers=auth_headers(ada),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["display_name"] == "Ada L"
    assert body["is_private"] is True
    assert body["is_verified"] is False


def test_follow_unfollow_and_notification(client, profile_factory):
    ada = profile_factory("ada")
    bo = profile_factory("bo")

    followed = client.post(f"/follows/{bo.id}", headers=auth_headers(ada)).json()
    assert followed["status"] == "followed"
    assert followed["followers_count"] == 1
    assert client.post(f"/follows/{bo.id}", headers=auth_headers(ada)).json()["status"] == "noop"
    assert client.post(f"/follows/{ada.id}", headers=auth_headers(ada)).status_code == 400

    followers = client.get(f"/follows/{bo.id}/followers", headers=auth_headers(bo)).json()["items"]
    assert [item["username"] for item in followers] == ["ada"]

    notifications = client.get("/notifications", headers=auth_headers(bo)).json()["items"]
    assert [item["type"] for item in notifications] == ["follow"]
    assert notifications[0]["actor"]["username"] == "ada"

    unfollowed = client.delete(f"/follows/{bo.id}", headers=auth_headers(ada)).json()
    assert unfollowed["status"] == "unfollowed"
    assert unfollowed["is_following"] is False


def test_close_friends_must_already_follow(client, profile_factory, follow):
    ada = profile_factory("ada")
    bo = profile_factory("bo")

    assert client.post(f"/follows/close-friends/{bo.id}", headers=auth_headers(ada)).status_code == 400

    follow(bo.id, ada.id)
    added = client.post(f"/follows/close-friends/{bo.id}", headers=auth_headers(ada))
    assert added.json() == {"profile_id": str(bo.id), "is_close_friend": True}
    listed = client.get("/follows/close-friends", headers=auth_headers(ada)).json()["items"]
    assert [item["username"] for item in listed] == ["bo"]

    client.delete(f"/follows/close-friends/{bo.id}", headers=auth_headers(ada))
    assert client.get("/follows/close-friends", headers=auth_headers(ada)).json()["items"] == []


def test_notifications_mark_read(client, profile_factory):
    ada = profile_factory("ada")
    bo = profile_factory("bo")
    cy = profile_factory("cy")
    client.post(f"/follows/{ada.id}", headers=auth_headers(bo))
    client.post(f"/follows/{ada.id}", headers=auth_headers(cy))

    summary = client.get("/notifications/summary", headers=auth_headers(ada)).json()
    assert summary == {"unread_count": 2}

    first = client.get("/notifications", headers=auth_headers(ada)).json()["items"][0]
    assert client.post(f"/notifications/{first['id']}/read", headers=auth_headers(bo)).status_code == 403
    marked = client.post(f"/notifications/{first['id']}/read", headers=auth_headers(ada)).json()
    assert marked["is_read"] is True

    assert client.post("/notifications/read-all", headers=auth_headers(ada)).json() == {"updated": 1}
    assert client.get("/notifications/summary", headers=auth_headers(ada)).json() == {"unread_count": 0}


def test_client_config_exposes_refresh_hints(client):
    config = client.get("/api/client-config").json()
    assert config["ephemeral_ttl_hours"] == 24
    assert config["conversation_poll_seconds"] > 0
