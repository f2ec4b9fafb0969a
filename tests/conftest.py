"""Shared fixtures: a throwaway SQLite database and helpers for seeding profiles."""
from __future__ import annotations

import os
from typing import Callable, Iterator
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_chatapp.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from chatapp.constants import ROLE_ADMIN, ROLE_USER  # noqa: E402
from chatapp.database import Base, SessionLocal, engine  # noqa: E402
from chatapp.main import app  # noqa: E402
from chatapp.models import Account, Follow, Profile, UserRole  # noqa: E402
from chatapp.services import create_access_token  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()
    yield


@pytest.fixture
def db() -> Iterator:
    with SessionLocal() as session:
        yield session


@pytest.fixture
def profile_factory() -> Callable[..., Profile]:
    def _factory(username: str, *, is_private: bool = False, admin: bool = False) -> Profile:
        with SessionLocal() as session:
            account = Account(login_email=f"{username.lower()}@chatapp.local", hashed_password="test-hash")
            account.profile = Profile(username=username, display_name=username.title(), is_private=is_private)
            account.roles.append(UserRole(role=ROLE_USER))
            if admin:
                account.roles.append(UserRole(role=ROLE_ADMIN))
            session.add(account)
            session.commit()
            session.refresh(account.profile)
            return account.profile
    return _factory


@pytest.fixture
def follow() -> Callable[[UUID, UUID], None]:
    def _follow(follower_id: UUID, following_id: UUID) -> None:
        with SessionLocal() as session:
            session.add(Follow(follower_id=follower_id, following_id=following_id))
            session.commit()
    return _follow


def auth_headers(profile: Profile, *, acting_as: UUID | None = None) -> dict[str, str]:
    token = create_access_token(profile.account_id, acting_as=acting_as)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
