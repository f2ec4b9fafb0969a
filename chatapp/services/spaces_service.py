"""DigitalOcean Spaces integration helpers.

Objects live under ``<bucket>/<account id>/...`` inside a single Spaces
bucket. Every write is checked against that prefix before it reaches
storage, so a caller can only ever touch files under its own account id.
"""
from __future__ import annotations

import logging
import os
import re
import time
import uuid
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import cast
from urllib.parse import urlparse

from boto3.session import Session
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from ..constants import STORAGE_BUCKETS
from ..security.policies import can_write_storage_key, deny
from ..security.secrets import MissingSecretError, is_placeholder, require_secret

logger = logging.getLogger(__name__)

AVATAR_BUCKET = "avatars"


@dataclass(frozen=True)
class SpacesConfig:
    """Runtime configuration extracted from environment variables."""

    key: str
    secret: str
    region: str
    bucket: str
    api_endpoint: str
    public_endpoint: str


@dataclass(frozen=True)
class SpacesUploadResult:
    """Metadata returned after uploading a file to Spaces."""

    url: str
    key: str
    bucket: str
    content_type: str


class SpacesConfigurationError(RuntimeError):
    """Raised when required DigitalOcean Spaces settings are missing or invalid."""


class SpacesUploadError(RuntimeError):
    """Raised when an upload to DigitalOcean Spaces fails."""


class SpacesDeletionError(RuntimeError):
    """Raised when deleting an object from DigitalOcean Spaces fails."""


@lru_cache(maxsize=1)
def load_spaces_config() -> SpacesConfig:
    """Read and validate DigitalOcean Spaces configuration from the environment."""

    required: dict[str, str | None] = {
        "DO_SPACES_KEY": os.getenv("DO_SPACES_KEY"),
        "DO_SPACES_SECRET": os.getenv("DO_SPACES_SECRET"),
        "DO_SPACES_REGION": os.getenv("DO_SPACES_REGION"),
        "DO_SPACES_NAME": os.getenv("DO_SPACES_NAME"),
        "DO_SPACES_ENDPOINT": os.getenv("DO_SPACES_ENDPOINT"),
    }

    missing = [name for name, value in required.items() if not value or not value.strip()]
    if missing:
        raise SpacesConfigurationError(
            "Missing required DigitalOcean Spaces configuration: " + ", ".join(sorted(missing))
        )

    try:
        key = require_secret("DO_SPACES_KEY")
        secret = require_secret("DO_SPACES_SECRET")
    except MissingSecretError as exc:
        raise SpacesConfigurationError(str(exc)) from exc

    region = cast(str, required["DO_SPACES_REGION"]).strip()
    bucket = cast(str, required["DO_SPACES_NAME"]).strip()
    endpoint_raw = cast(str, required["DO_SPACES_ENDPOINT"]).strip()

    if is_placeholder(region):
        raise SpacesConfigurationError("DO_SPACES_REGION must be set to a valid region identifier")
    if is_placeholder(bucket):
        raise SpacesConfigurationError("DO_SPACES_NAME must be set to the target bucket name")
    if is_placeholder(endpoint_raw):
        raise SpacesConfigurationError("DO_SPACES_ENDPOINT must point to your Spaces CDN endpoint")

    public_endpoint = endpoint_raw.rstrip("/")
    parsed = urlparse(public_endpoint)
    if not parsed.scheme:
        public_endpoint = f"https://{public_endpoint.lstrip(':/')}"
        parsed = urlparse(public_endpoint)
    if not (parsed.netloc or parsed.path):
        raise SpacesConfigurationError("DO_SPACES_ENDPOINT must include a hostname.")

    return SpacesConfig(
        key=key,
        secret=secret,
        region=region,
        bucket=bucket,
        api_endpoint=f"https://{region}.digitaloceanspaces.com",
        public_endpoint=parsed.geturl().rstrip("/"),
    )


@lru_cache(maxsize=1)
def get_spaces_client() -> BaseClient:
    """Create a singleton boto3 client for Spaces interactions."""

    config = load_spaces_config()
    session = Session()
    return session.client(
        "s3",
        region_name=config.region,
        endpoint_url=config.api_endpoint,
        aws_access_key_id=config.key,
        aws_secret_access_key=config.secret,
    )


def _safe_extension(filename: str | None) -> str:
    extension = Path(filename or "").suffix.lower()
    if extension and not re.fullmatch(r"\.[A-Za-z0-9]{1,10}", extension):
        return ""
    return extension


def build_object_key(bucket: str, account_id: uuid.UUID, filename: str | None, *, fixed_name: str | None = None) -> str:
    """``<bucket>/<account id>/<uuid or fixed name><ext>``."""

    if bucket not in STORAGE_BUCKETS:
        raise ValueError(f"Unknown storage bucket: {bucket}")
    stem = fixed_name or uuid.uuid4().hex
    return f"{bucket}/{account_id}/{stem}{_safe_extension(filename)}"


def build_public_url(key: str) -> str:
    """Build the public URL for an object stored in DigitalOcean Spaces."""

    config = load_spaces_config()
    normalized_key = key.lstrip("/")
    return f"{config.public_endpoint}/{normalized_key}" if normalized_key else config.public_endpoint


def with_cache_buster(url: str, *, timestamp: float | None = None) -> str:
    """Append ``?t=<epoch>`` so clients refetch an object overwritten under the same key."""

    stamp = int(timestamp if timestamp is not None else time.time())
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}t={stamp}"


def delete_file_from_spaces(key: str, *, account_id: uuid.UUID, client: BaseClient | None = None) -> None:
    """Remove an object the caller owns."""

    if not key:
        return
    normalized_key = key.lstrip("/")
    bucket = normalized_key.split("/", 1)[0]
    if not can_write_storage_key(normalized_key, bucket, account_id):
        deny(account_id, "storage.delete", normalized_key)

    config = load_spaces_config()
    s3_client = client or get_spaces_client()
    try:
        s3_client.delete_object(Bucket=config.bucket, Key=normalized_key)
    except (ClientError, BotoCoreError) as exc:
        logger.exception("Failed to delete Spaces object %s", normalized_key)
        raise SpacesDeletionError("Unable to delete media from storage") from exc


async def upload_file_to_spaces(
    file: UploadFile,
    *,
    bucket: str,
    account_id: uuid.UUID,
    client: BaseClient | None = None,
) -> SpacesUploadResult:
    """Upload an ``UploadFile`` under the caller's prefix and return its public metadata.

    Avatar uploads always land on the same key so a new picture replaces the
    old one; the returned URL carries a cache-buster.
    """

    if bucket not in STORAGE_BUCKETS:
        raise SpacesUploadError(f"Unknown storage bucket: {bucket}")
    fixed_name = "avatar" if bucket == AVATAR_BUCKET else None
    key = build_object_key(bucket, account_id, file.filename, fixed_name=fixed_name)
    if not can_write_storage_key(key, bucket, account_id):
        deny(account_id, "storage.upload", key)

    config = load_spaces_config()
    s3_client = client or get_spaces_client()
    content_type = (file.content_type or "application/octet-stream").strip() or "application/octet-stream"
    file_obj = getattr(file, "file", None)
    if file_obj is None:
        raise SpacesUploadError("UploadFile is missing an underlying file buffer.")

    def _upload() -> None:
        try:
            file_obj.seek(0)
            s3_client.upload_fileobj(
                file_obj,
                config.bucket,
                key,
                ExtraArgs={"ACL": "public-read", "ContentType": content_type},
            )
        except (ClientError, BotoCoreError) as exc:
            logger.exception("Upload to DigitalOcean Spaces failed: %s", exc)
            raise SpacesUploadError("Upload to DigitalOcean Spaces failed") from exc

    await run_in_threadpool(_upload)

    url = build_public_url(key)
    if fixed_name is not None:
        url = with_cache_buster(url)
    logger.info("Stored %s for account %s", key, account_id)
    return SpacesUploadResult(url=url, key=key, bucket=bucket, content_type=content_type)


__all__ = [
    "AVATAR_BUCKET",
    "SpacesConfig",
    "SpacesConfigurationError",
    "SpacesUploadError",
    "SpacesDeletionError",
    "SpacesUploadResult",
    "build_object_key",
    "build_public_url",
    "with_cache_buster",
    "load_spaces_config",
    "get_spaces_client",
    "upload_file_to_spaces",
    "delete_file_from_spaces",
]
