"""
Runtime configuration helpers for the FastAPI application.

Loads DATABASE_URL and the remaining variables from the process environment,
falling back to the .env file located in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    # Required; must come from the environment or .env
    database_url: str = Field(..., alias="DATABASE_URL")

    app_name: str = Field(default="Chatapp Backend", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")
    public_base_url: str = Field(default="http://localhost:8000", alias="PUBLIC_BASE_URL")

    # Sign-up only asks for a handle; the auth identity is an email-shaped login
    login_email_domain: str = Field(default="chatapp.local", alias="LOGIN_EMAIL_DOMAIN")

    # Stories and notes
    ephemeral_ttl_hours: int = Field(default=24, ge=1, alias="EPHEMERAL_TTL_HOURS")

    # Refresh hints published to clients
    conversation_poll_seconds: float = Field(default=2.0, alias="CONVERSATION_POLL_SECONDS")
    conversation_list_poll_seconds: float = Field(default=5.0, alias="CONVERSATION_LIST_POLL_SECONDS")
    story_poll_seconds: float = Field(default=30.0, alias="STORY_POLL_SECONDS")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
