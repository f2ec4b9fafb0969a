"""Pydantic schemas for authentication endpoints."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field

from .profiles import ProfileResponse


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=20)
    display_name: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    profile_id: UUID
    is_admin: bool = False
    impersonating_profile_id: UUID | None = None


class SessionResponse(BaseModel):
    """The resolved identity behind a bearer token."""

    profile: ProfileResponse
    real_profile: ProfileResponse
    is_admin: bool
    is_impersonating: bool


__all__ = ["RegisterRequest", "LoginRequest", "AuthResponse", "SessionResponse"]
