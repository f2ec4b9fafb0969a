"""Database layer utilities for SQLAlchemy-backed persistence."""
from __future__ import annotations

from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import get_settings

# Load settings (DATABASE_URL and others come from env/.env)
settings = get_settings()

_connect_args: dict[str, Any] = {}
if settings.database_url.startswith("sqlite"):
    # Test clients run handlers on a worker thread
    _connect_args["check_same_thread"] = False

engine: Engine = create_engine(settings.database_url, pool_pre_ping=True, future=True, connect_args=_connect_args)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    future=True,
    expire_on_commit=False,
)

Base = declarative_base()


def get_engine() -> Engine:
    """Return the configured SQLAlchemy engine."""
    return engine


def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency that yields a SQLAlchemy session per request."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def create_session() -> Session:
    """Return a new SQLAlchemy session for websocket handlers or scripts."""
    return SessionLocal()


def init_db() -> None:
    """Initialise database schema by creating tables when missing."""
    # Import models to ensure they are registered on the metadata before create_all runs.
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


__all__ = [
    "Base",
    "SessionLocal",
    "get_engine",
    "get_session",
    "create_session",
    "init_db",
]
