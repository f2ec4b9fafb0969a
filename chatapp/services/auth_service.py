"""Business logic for authentication, session resolution and admin impersonation."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from uuid import UUID

from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import HANDLE_PATTERN, ROLE_ADMIN, ROLE_USER
from ..database import get_session
from ..models import Account, Profile, UserRole
from ..models.base import utcnow
from ..schemas import RegisterRequest
from ..security.policies import deny
from ..security.secrets import MissingSecretError, require_secret

logger = logging.getLogger(__name__)

_security = HTTPBearer(auto_error=False)
_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
DEFAULT_TOKEN_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "1440"))


@dataclass(slots=True)
class TokenClaims:
    account_id: UUID
    acting_as: UUID | None = None


@dataclass(slots=True)
class ActorContext:
    """The identity every service call runs under.

    ``real_actor`` is the profile bound to the signed-in account.
    ``effective_actor`` is the profile reads and writes are attributed to; it
    differs from ``real_actor`` only while an admin impersonates someone.
    """

    account: Account
    real_actor: Profile
    effective_actor: Profile
    is_admin: bool = False

    @property
    def is_impersonating(self) -> bool:
        return self.real_actor.id != self.effective_actor.id

    @property
    def actor_id(self) -> UUID:
        return self.effective_actor.id


@lru_cache(maxsize=1)
def _get_jwt_secret() -> str:
    try:
        return require_secret("JWT_SECRET_KEY", min_length=8)
    except MissingSecretError as exc:
        raise RuntimeError(str(exc)) from exc


def hash_password(password: str) -> str:
    """Hash a plain-text password using bcrypt."""

    return _pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify that ``password`` matches ``hashed_password``."""

    try:
        return _pwd_context.verify(password, hashed_password)
    except (ValueError, TypeError):
        logger.exception("Password verification failed due to an unexpected error")
        return False


def login_email_for(handle: str) -> str:
    """Synthesize the email-shaped login identifier for a handle."""

    domain = get_settings().login_email_domain
    return f"{handle.strip().lower()}@{domain}"


def create_access_token(
    account_id: UUID,
    *,
    acting_as: UUID | None = None,
    expires_minutes: Optional[int] = None,
) -> str:
    """Create a signed JWT for ``account_id``, optionally carrying an impersonation target."""

    expire_delta = timedelta(minutes=expires_minutes or DEFAULT_TOKEN_MINUTES)
    now = datetime.now(timezone.utc)
    payload = {"sub": str(account_id), "exp": now + expire_delta, "iat": now}
    if acting_as is not None:
        payload["act"] = str(acting_as)
    return jwt.encode(payload, _get_jwt_secret(), algorithm=ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """Decode and validate a JWT, returning the embedded account and impersonation claims."""

    try:
        payload = jwt.decode(token, _get_jwt_secret(), algorithms=[ALGORITHM])
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    subject = payload.get("sub")
    if not subject:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    try:
        account_id = UUID(subject)
        acting_as = UUID(payload["act"]) if payload.get("act") else None
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload") from exc
    return TokenClaims(account_id=account_id, acting_as=acting_as)


def is_admin_account(db: Session, account_id: UUID) -> bool:
    """Role membership is read from ``user_roles``, never from the profile row."""

    role = db.scalar(
        select(UserRole.id).where(UserRole.account_id == account_id, UserRole.role == ROLE_ADMIN)
    )
    return role is not None


def register_account(db: Session, payload: RegisterRequest) -> Tuple[Profile, str]:
    """Create the account, its profile and its default role, returning the profile and a token."""

    handle = payload.username.strip()
    if not HANDLE_PATTERN.match(handle):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username must be 3-20 letters, digits or underscores",
        )
    display_name = payload.display_name.strip()
    if not display_name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Display name is required")

    login_email = login_email_for(handle)
    existing = db.scalar(select(Profile.id).where(Profile.username == handle))
    if existing is None:
        existing = db.scalar(select(Account.id).where(Account.login_email == login_email))
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already in use")

    account = Account(login_email=login_email, hashed_password=hash_password(payload.password))
    profile = Profile(username=handle, display_name=display_name)
    account.profile = profile
    account.roles.append(UserRole(role=ROLE_USER))

    try:
        db.add(account)
        db.commit()
        db.refresh(profile)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to register account for handle %s", handle)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to register user") from exc

    logger.info("Registered profile %s (%s)", profile.id, handle)
    return profile, create_access_token(account.id)


def authenticate(db: Session, username: str, password: str) -> Optional[Account]:
    """Authenticate a handle and password against the synthesized login identifier."""

    account = db.scalar(select(Account).where(Account.login_email == login_email_for(username)))
    if not account:
        return None
    if not verify_password(password, account.hashed_password):
        return None
    return account


def resolve_actor_context(db: Session, token: str) -> ActorContext:
    """Turn a bearer token into an :class:`ActorContext`, stamping the real profile's ``last_seen``."""

    claims = decode_access_token(token)
    account = db.get(Account, claims.account_id)
    if account is None or account.profile is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    real_actor = account.profile
    admin = is_admin_account(db, account.id)
    effective_actor = real_actor
    if claims.acting_as is not None and claims.acting_as != real_actor.id:
        if not admin:
            deny(real_actor.id, "impersonate", claims.acting_as)
        target = db.get(Profile, claims.acting_as)
        if target is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Impersonated profile no longer exists")
        effective_actor = target

    try:
        real_actor.last_seen = utcnow()
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Failed to update last_seen for profile %s", real_actor.id)

    return ActorContext(account=account, real_actor=real_actor, effective_actor=effective_actor, is_admin=admin)


async def get_actor_context(
    credentials: HTTPAuthorizationCredentials = Depends(_security),
    db: Session = Depends(get_session),
) -> ActorContext:
    """Resolve the caller's identity from the provided bearer token."""

    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    return resolve_actor_context(db, credentials.credentials)


async def get_optional_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
    db: Session = Depends(get_session),
) -> ActorContext | None:
    """Return the caller's identity when a valid bearer token is provided."""

    if not credentials or credentials.scheme.lower() != "bearer":
        return None
    try:
        return resolve_actor_context(db, credentials.credentials)
    except HTTPException:
        return None


async def require_admin(context: ActorContext = Depends(get_actor_context)) -> ActorContext:
    if not context.is_admin:
        deny(context.real_actor.id, "admin")
    return context


def impersonate(db: Session, context: ActorContext, target_id: UUID) -> str:
    """Return a token whose effective actor is ``target_id``; admins only."""

    if not context.is_admin:
        deny(context.real_actor.id, "impersonate", target_id)
    target = db.get(Profile, target_id)
    if target is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    logger.info("Admin profile %s now acting as %s", context.real_actor.id, target.id)
    if target.id == context.real_actor.id:
        return create_access_token(context.account.id)
    return create_access_token(context.account.id, acting_as=target.id)


def exit_impersonation(context: ActorContext) -> str:
    """Return a token for the real actor. Safe to call when not impersonating."""

    if context.is_impersonating:
        logger.info("Profile %s stopped acting as %s", context.real_actor.id, context.effective_actor.id)
    return create_access_token(context.account.id)


__all__ = [
    "ActorContext",
    "TokenClaims",
    "register_account",
    "authenticate",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
    "login_email_for",
    "is_admin_account",
    "resolve_actor_context",
    "get_actor_context",
    "get_optional_context",
    "require_admin",
    "impersonate",
    "exit_impersonation",
]
