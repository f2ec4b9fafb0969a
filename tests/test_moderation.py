"""Admin dashboard, verification badges and user reports."""
from __future__ import annotations

from conftest import auth_headers


def test_admin_routes_reject_regular_users(client, profile_factory):
    user = profile_factory("plain")
    assert client.get("/moderation/stats", headers=auth_headers(user)).status_code == 403
    assert client.get("/moderation/users", headers=auth_headers(user)).status_code == 403


def test_stats_and_user_listing(client, profile_factory):
    admin = profile_factory("warden", admin=True)
    profile_factory("tenant")

    stats = client.get("/moderation/stats", headers=auth_headers(admin)).json()
    assert stats["total_profiles"] == 2
    assert stats["total_messages"] == 0

    listing = client.get("/moderation/users", params={"search": "ward"}, headers=auth_headers(admin)).json()
    assert listing["total"] == 1
    assert listing["items"][0]["is_admin"] is True


def test_badges_can_be_granted_and_cleared(client, profile_factory):
    admin = profile_factory("warden", admin=True)
    target = profile_factory("tenant")
    url = f"/moderation/users/{target.id}/badge"

    granted = client.put(url, json={"kind": "gold", "label": "Founder"}, headers=auth_headers(admin)).json()
    assert granted["is_verified"] is True
    assert granted["verified_type"] == "gold"
    assert granted["badge_text"] == "Founder"

    cleared = client.put(url, json={"kind": "none"}, headers=auth_headers(admin)).json()
    assert cleared["is_verified"] is False
    assert cleared["verified_type"] is None

    # Users cannot grant themselves a badge through the profile endpoint
    response = client.patch("/profiles/me", json={"is_verified": True}, headers=auth_headers(target))
    assert response.json()["is_verified"] is False


def test_reports_are_filed_and_resolved(client, profile_factory):
    admin = profile_factory("warden", admin=True)
    reporter = profile_factory("reporter")
    offender = profile_factory("offender")

    payload = {"content_type": "profile", "content_id": str(offender.id), "reason": "spam account"}
    created = client.post("/reports", json=payload, headers=auth_headers(reporter))
    assert created.status_code == 201
    # A second report on the same target updates the pending one
    again = client.post("/reports", json={**payload, "reason": "still spam"}, headers=auth_headers(reporter))
    assert again.json()["id"] == created.json()["id"]

    missing = {"content_type": "post", "content_id": str(offender.id), "reason": "nope"}
    assert client.post("/reports", json=missing, headers=auth_headers(reporter)).status_code == 404

    queue = client.get("/moderation/reports", headers=auth_headers(admin)).json()
    assert queue["total"] == 1
    assert queue["items"][0]["reason"] == "still spam"
    assert queue["items"][0]["reporter"]["username"] == "reporter"

    report_id = queue["items"][0]["id"]
    resolved = client.post(
        f"/moderation/reports/{report_id}/resolve",
        json={"status": "dismissed"},
        headers=auth_headers(admin),
    )
    assert resolved.json()["status"] == "dismissed"
    assert client.get("/moderation/reports", headers=auth_headers(admin)).json()["total"] == 0


def test_admins_can_browse_a_users_conversations_without_reading_them(client, profile_factory):
    admin = profile_factory("warden", admin=True)
    ada = profile_factory("ada")
    bo = profile_factory("bo")
    outsider = profile_factory("outsider")

    conversation_id = client.post(
        "/conversations", json={"participant_id": str(bo.id)}, headers=auth_headers(ada)
    ).json()["conversation_id"]
    client.post(f"/conversations/{conversation_id}/messages", json={"content": "hello"}, headers=auth_headers(ada))

    listing = client.get(f"/moderation/users/{bo.id}/conversations", headers=auth_headers(admin))
    assert listing.status_code == 200
    items = listing.json()["items"]
    assert [item["participant"]["username"] for item in items] == ["ada"]
    assert items[0]["unread_count"] == 1

    thread = client.get(f"/moderation/conversations/{conversation_id}/messages", headers=auth_headers(admin)).json()
    assert sorted(member["username"] for member in thread["participants"]) == ["ada", "bo"]
    assert [entry["message"]["content"] for entry in thread["messages"]] == ["hello"]
    assert thread["messages"][0]["sender"]["username"] == "ada"

    # Browsing leaves the read state alone
    unread = client.get(f"/conversations/{conversation_id}/unread", headers=auth_headers(bo)).json()
    assert unread["unread_count"] == 1

    denied = client.get(f"/moderation/conversations/{conversation_id}/messages", headers=auth_headers(outsider))
    assert denied.status_code == 403
    missing = client.get(
        "/moderation/users/00000000-0000-0000-0000-000000000000/conversations", headers=auth_headers(admin)
    )
    assert missing.status_code == 404
