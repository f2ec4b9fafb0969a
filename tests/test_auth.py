"""Registration, login and admin impersonation flows."""
from __future__ import annotations

from chatapp.models import UserRole
from chatapp.services.auth_service import login_email_for

from conftest import auth_headers


def test_register_then_login_returns_token_for_profile(client, db):
    response = client.post(
        "/auth/register",
        json={"username": "River_9", "display_name": "River", "password": "hunter22"},
    )
    assert response.status_code == 201
    payload = response.json()
    assert payload["token_type"] == "bearer"
    assert payload["is_admin"] is False

    roles = db.query(UserRole).all()
    assert [role.role for role in roles] == ["user"]

    login = client.post("/auth/login", json={"username": "River_9", "password": "hunter22"})
    assert login.status_code == 200
    assert login.json()["profile_id"] == payload["profile_id"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {login.json()['access_token']}"})
    assert me.status_code == 200
    assert me.json()["profile"]["username"] == "River_9"
    assert me.json()["is_impersonating"] is False


def test_register_rejects_bad_handles_and_duplicates(client):
    bad = client.post("/auth/register", json={"username": "no spaces", "display_name": "X", "password": "secret1"})
    assert bad.status_code == 400

    first = client.post("/auth/register", json={"username": "maple", "display_name": "Maple", "password": "secret1"})
    assert first.status_code == 201
    again = client.post("/auth/register", json={"username": "MAPLE", "display_name": "Other", "password": "secret1"})
    assert again.status_code == 409


def test_login_with_wrong_password_is_unauthorized(client):
    client.post("/auth/register", json={"username": "cedar", "display_name": "Cedar", "password": "secret1"})
    response = client.post("/auth/login", json={"username": "cedar", "password": "wrong-pass"})
    assert response.status_code == 401


def test_login_email_is_synthesized_from_handle():
    assert login_email_for(" Fern ") == "fern@chatapp.local"


def test_requests_without_token_are_rejected(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/conversations").status_code == 401


def test_admin_can_impersonate_and_exit(client, profile_factory):
    admin = profile_factory("warden", admin=True)
    target = profile_factory("tenant")

    response = client.post("/auth/impersonate", json={"profile_id": str(target.id)}, headers=auth_headers(admin))
    assert response.status_code == 200
    body = response.json()
    assert body["impersonating_profile_id"] == str(target.id)

    acting = {"Authorization": f"Bearer {body['access_token']}"}
    me = client.get("/auth/me", headers=acting).json()
    assert me["profile"]["id"] == str(target.id)
    assert me["real_profile"]["id"] == str(admin.id)
    assert me["is_impersonating"] is True

    exit_response = client.post("/auth/impersonate/exit", headers=acting)
    assert exit_response.status_code == 200
    restored = {"Authorization": f"Bearer {exit_response.json()['access_token']}"}
    assert client.get("/auth/me", headers=restored).json()["is_impersonating"] is False

    # Exiting twice is harmless
    assert client.post("/auth/impersonate/exit", headers=restored).status_code == 200


def test_non_admin_cannot_impersonate(client, profile_factory):
    user = profile_factory("plain")
    target = profile_factory("victim")

    response = client.post("/auth/impersonate", json={"profile_id": str(target.id)}, headers=auth_headers(user))
    assert response.status_code == 403

    forged = auth_headers(user, acting_as=target.id)
    assert client.get("/auth/me", headers=forged).status_code == 403
