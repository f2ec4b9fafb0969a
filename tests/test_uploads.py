"""Spaces uploads with the boto3 client replaced by a recorder."""
from __future__ import annotations

from typing import Any

import pytest

from chatapp.services import spaces_service

from conftest import auth_headers


class RecordingClient:
    def __init__(self) -> None:
        self.uploads: list[dict[str, Any]] = []
        self.deleted: list[str] = []

    def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None):  # noqa: N803
        self.uploads.append({"bucket": bucket, "key": key, "body": fileobj.read(), "extra": ExtraArgs})

    def delete_object(self, Bucket, Key):  # noqa: N803
        self.deleted.append(Key)


@pytest.fixture
def spaces(monkeypatch) -> RecordingClient:
    monkeypatch.setenv("DO_SPACES_KEY", "test-key-id")
    monkeypatch.setenv("DO_SPACES_SECRET", "test-secret-value")
    monkeypatch.setenv("DO_SPACES_REGION", "nyc3")
    monkeypatch.setenv("DO_SPACES_NAME", "chatapp-media")
    monkeypatch.setenv("DO_SPACES_ENDPOINT", "chatapp-media.nyc3.cdn.digitaloceanspaces.com")
    spaces_service.load_spaces_config.cache_clear()
    recorder = RecordingClient()
    monkeypatch.setattr(spaces_service, "get_spaces_client", lambda: recorder)
    yield recorder
    spaces_service.load_spaces_config.cache_clear()


def test_config_normalizes_endpoint(spaces):
    config = spaces_service.load_spaces_config()
    assert config.api_endpoint == "https://nyc3.digitaloceanspaces.com"
    assert config.public_endpoint == "https://chatapp-media.nyc3.cdn.digitaloceanspaces.com"


def test_post_upload_lands_under_account_prefix(client, profile_factory, spaces):
    author = profile_factory("author")
    response = client.post(
        "/uploads/posts",
        files={"file": ("photo.JPG", b"jpeg-bytes", "image/jpeg")},
        headers=auth_headers(author),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["key"].startswith(f"posts/{author.account_id}/")
    assert body["key"].endswith(".jpg")
    assert body["url"] == f"https://chatapp-media.nyc3.cdn.digitaloceanspaces.com/{body['key']}"
    assert spaces.uploads[0]["body"] == b"jpeg-bytes"
    assert spaces.uploads[0]["extra"]["ContentType"] == "image/jpeg"


def test_avatar_upload_overwrites_and_updates_profile(client, profile_factory, spaces):
    author = profile_factory("author")
    for _ in range(2):
        response = client.post(
            "/uploads/avatars",
            files={"file": ("me.png", b"png", "image/png")},
            headers=auth_headers(author),
        )
        assert response.status_code == 201

    assert {upload["key"] for upload in spaces.uploads} == {f"avatars/{author.account_id}/avatar.png"}
    assert "?t=" in response.json()["url"]
    profile = client.get("/profiles/author", headers=auth_headers(author)).json()
    assert profile["avatar_url"] == response.json()["url"]


def test_unknown_bucket_and_foreign_keys_are_rejected(client, profile_factory, spaces):
    author = profile_factory("author")
    other = profile_factory("other")
    headers = auth_headers(author)

    response = client.post("/uploads/secrets", files={"file": ("a.png", b"x", "image/png")}, headers=headers)
    assert response.status_code == 404

    foreign_key = f"posts/{other.account_id}/photo.jpg"
    assert client.delete("/uploads", params={"key": foreign_key}, headers=headers).status_code == 403
    own_key = f"posts/{author.account_id}/photo.jpg"
    assert client.delete("/uploads", params={"key": own_key}, headers=headers).status_code == 204
    assert spaces.deleted == [own_key]


def test_missing_configuration_is_reported(client, profile_factory, monkeypatch):
    for name in ("DO_SPACES_KEY", "DO_SPACES_SECRET", "DO_SPACES_REGION", "DO_SPACES_NAME", "DO_SPACES_ENDPOINT"):
        monkeypatch.delenv(name, raising=False)
    spaces_service.load_spaces_config.cache_clear()
    author = profile_factory("author")

    response = client.post(
        "/uploads/posts",
        files={"file": ("a.png", b"x", "image/png")},
        headers=auth_headers(author),
    )
    assert response.status_code == 500
    spaces_service.load_spaces_config.cache_clear()
