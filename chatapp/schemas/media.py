"""Schemas for media uploads."""
from __future__ import annotations

from pydantic import BaseModel, Field


class MediaUploadResponse(BaseModel):
    """Response returned after uploading a file to Spaces."""

    url: str = Field(..., description="Public URL of the uploaded asset")
    key: str = Field(..., description="Object key inside the Spaces bucket")
    bucket: str = Field(..., description="Logical storage bucket the key lives under")
    content_type: str = Field(..., description="MIME type associated with the uploaded file")


__all__ = ["MediaUploadResponse"]
