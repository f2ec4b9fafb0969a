"""Small response shapes shared by several routers."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel

from ..models.base import ensure_aware

# SQLite hands back naive datetimes; every timestamp leaves the API in UTC.
UTCDateTime = Annotated[datetime, AfterValidator(ensure_aware)]


class LikeStateResponse(BaseModel):
    liked: bool
    likes_count: int


class SaveStateResponse(BaseModel):
    saved: bool


__all__ = ["LikeStateResponse", "SaveStateResponse", "UTCDateTime"]
