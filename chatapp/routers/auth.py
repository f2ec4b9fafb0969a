"""Authentication, session and impersonation API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..schemas import AuthResponse, ImpersonationRequest, LoginRequest, ProfileResponse, RegisterRequest, SessionResponse
from ..services import (
    ActorContext,
    authenticate,
    create_access_token,
    exit_impersonation,
    get_actor_context,
    impersonate,
    register_account,
)
from ..services.auth_service import is_admin_account

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_endpoint(
    payload: RegisterRequest,
    db: Session = Depends(get_session),
) -> AuthResponse:
    profile, token = register_account(db, payload)
    return AuthResponse(access_token=token, profile_id=profile.id)


@router.post("/login", response_model=AuthResponse)
async def login_endpoint(
    payload: LoginRequest,
    db: Session = Depends(get_session),
) -> AuthResponse:
    account = authenticate(db, payload.username, payload.password)
    if not account or account.profile is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    token = create_access_token(account.id)
    return AuthResponse(access_token=token, profile_id=account.profile.id, is_admin=is_admin_account(db, account.id))


@router.get("/me", response_model=SessionResponse)
async def me_endpoint(context: ActorContext = Depends(get_actor_context)) -> SessionResponse:
    return SessionResponse(
        profile=ProfileResponse.model_validate(context.effective_actor),
        real_profile=ProfileResponse.model_validate(context.real_actor),
        is_admin=context.is_admin,
        is_impersonating=context.is_impersonating,
    )


@router.post("/impersonate", response_model=AuthResponse)
async def impersonate_endpoint(
    payload: ImpersonationRequest,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_session),
) -> AuthResponse:
    token = impersonate(db, context, payload.profile_id)
    acting_as = None if payload.profile_id == context.real_actor.id else payload.profile_id
    return AuthResponse(
        access_token=token,
        profile_id=context.real_actor.id,
        is_admin=context.is_admin,
        impersonating_profile_id=acting_as,
    )


@router.post("/impersonate/exit", response_model=AuthResponse)
async def exit_impersonation_endpoint(context: ActorContext = Depends(get_actor_context)) -> AuthResponse:
    token = exit_impersonation(context)
    return AuthResponse(access_token=token, profile_id=context.real_actor.id, is_admin=context.is_admin)
