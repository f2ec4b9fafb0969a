"""Direct conversations: resolution, sending, read receipts and unread counts."""
from __future__ import annotations

from datetime import timedelta

from chatapp.models.base import utcnow
from chatapp.schemas import MessageSendRequest
from chatapp.services import find_or_create, list_conversations, mark_read, send_message, unread_count

from conftest import auth_headers


def test_find_or_create_is_symmetric(db, profile_factory):
    ada = profile_factory("ada")
    bo = profile_factory("bo")

    first, created = find_or_create(db, actor_id=ada.id, other_id=bo.id)
    second, created_again = find_or_create(db, actor_id=bo.id, other_id=ada.id)

    assert created is True
    assert created_again is False
    assert first.id == second.id


def test_cannot_open_conversation_with_self_or_unknown(client, profile_factory):
    ada = profile_factory("ada")
    headers = auth_headers(ada)

    assert client.post("/conversations", json={"participant_id": str(ada.id)}, headers=headers).status_code == 400
    unknown = "00000000-0000-4000-8000-000000000000"
    assert client.post("/conversations", json={"participant_id": unknown}, headers=headers).status_code == 404


def test_send_and_read_flow_over_http(client, profile_factory):
    ada = profile_factory("ada")
    bo = profile_factory("bo")

    resolved = client.post("/conversations", json={"participant_id": str(bo.id)}, headers=auth_headers(ada))
    assert resolved.status_code == 200
    assert resolved.json()["is_new"] is True
    conversation_id = resolved.json()["conversation_id"]

    for text in ("hi", "are you there?"):
        sent = client.post(
            f"/conversations/{conversation_id}/messages",
            json={"content": text},
            headers=auth_headers(ada),
        )
        assert sent.status_code == 201
        assert sent.json()["is_read"] is False

    unread = client.get(f"/conversations/{conversation_id}/unread", headers=auth_headers(bo))
    assert unread.json()["unread_count"] == 2

    listing = client.get("/conversations", headers=auth_headers(bo)).json()["items"]
    assert len(listing) == 1
    assert listing[0]["participant"]["username"] == "ada"
    assert listing[0]["last_message"]["content"] == "are you there?"
    assert listing[0]["unread_count"] == 2

    read = client.post(f"/conversations/{conversation_id}/read", headers=auth_headers(bo))
    assert read.json() == {"conversation_id": conversation_id, "updated": 2, "unread_count": 0}

    thread = client.get(f"/conversations/{conversation_id}/messages", headers=auth_headers(ada)).json()
    assert [entry["message"]["content"] for entry in thread["messages"]] == ["hi", "are you there?"]
    assert all(entry["message"]["is_read"] for entry in thread["messages"])


def test_outsiders_cannot_read_or_write(client, profile_factory):
    ada = profile_factory("ada")
    bo = profile_factory("bo")
    eve = profile_factory("eve")
    conversation_id = client.post(
        "/conversations", json={"participant_id": str(bo.id)}, headers=auth_headers(ada)
    ).json()["conversation_id"]

    headers = auth_headers(eve)
    assert client.get(f"/conversations/{conversation_id}/messages", headers=headers).status_code == 403
    response = client.post(f"/conversations/{conversation_id}/messages", json={"content": "x"}, headers=headers)
    assert response.status_code == 403


def test_empty_messages_are_rejected(client, profile_factory):
    ada = profile_factory("ada")
    bo = profile_factory("bo")
    conversation_id = client.post(
        "/conversations", json={"participant_id": str(bo.id)}, headers=auth_headers(ada)
    ).json()["conversation_id"]

    blank = client.post(f"/conversations/{conversation_id}/messages", json={"content": "   "}, headers=auth_headers(ada))
    assert blank.status_code == 400
    image = client.post(
        f"/conversations/{conversation_id}/messages",
        json={"message_type": "image"},
        headers=auth_headers(ada),
    )
    assert image.status_code == 400


def test_mark_read_is_idempotent_and_skips_own_messages(db, profile_factory):
    ada = profile_factory("ada")
    bo = profile_factory("bo")
    conversation, _ = find_or_create(db, actor_id=ada.id, other_id=bo.id)

    send_message(db, conversation_id=conversation.id, sender_id=ada.id, payload=MessageSendRequest(content="one"))
    send_message(db, conversation_id=conversation.id, sender_id=bo.id, payload=MessageSendRequest(content="two"))

    assert unread_count(db, conversation_id=conversation.id, viewer_id=bo.id) == 1
    assert mark_read(db, conversation_id=conversation.id, reader_id=bo.id) == 1
    assert mark_read(db, conversation_id=conversation.id, reader_id=bo.id) == 0
    assert mark_read(db, conversation_id=conversation.id, reader_id=bo.id, message_ids=[]) == 0
    # Bo's own message stays unread for Ada
    assert unread_count(db, conversation_id=conversation.id, viewer_id=ada.id) == 1


def test_conversations_are_listed_by_latest_activity(db, profile_factory):
    ada = profile_factory("ada")
    bo = profile_factory("bo")
    cy = profile_factory("cy")
    with_bo, _ = find_or_create(db, actor_id=ada.id, other_id=bo.id)
    with_cy, _ = find_or_create(db, actor_id=ada.id, other_id=cy.id)

    base = utcnow()
    send_message(db, conversation_id=with_cy.id, sender_id=cy.id, payload=MessageSendRequest(content="old"), now=base)
    send_message(
        db,
        conversation_id=with_bo.id,
        sender_id=bo.id,
        payload=MessageSendRequest(content="new"),
        now=base + timedelta(minutes=5),
    )

    entries = list_conversations(db, ada.id)
    assert [entry.participant.username for entry in entries] == ["bo", "cy"]
    assert [entry.unread_count for entry in entries] == [1, 1]
