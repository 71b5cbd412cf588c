"""Authentication and user management endpoints."""

from fastapi import APIRouter, Query, status
from pydantic import BaseModel, EmailStr, Field

from notes_app.api.deps import AdminAuth, MemberAuth, Session, SessionAuth
from notes_app.models.tenant import TenantRead, to_tenant_read
from notes_app.models.user import (
    UserInvite,
    UserProfileUpdate,
    UserRead,
    UserRole,
    to_user_read,
)
from notes_app.services import users as user_service
from notes_app.services.access import require_member
from notes_app.services.auth import LoginResult, authenticate

router = APIRouter(prefix="/auth", tags=["auth"])

PASSWORD_MIN_LENGTH = 6


# ── Schemas ──────────────────────────────────────────────────

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ProfileResponse(BaseModel):
    user: UserRead
    tenant: TenantRead


class ProfileUpdateRequest(BaseModel):
    profile: UserProfileUpdate


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=128)


class MessageResponse(BaseModel):
    message: str


class UserMessageResponse(MessageResponse):
    user: UserRead


# ── Routes ───────────────────────────────────────────────────

@router.post("/login", response_model=LoginResult)
async def login(body: LoginRequest, session: Session) -> LoginResult:
    """Authenticate with email + password, receive a JWT."""
    return await authenticate(session, body.email, body.password)


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(auth: SessionAuth) -> ProfileResponse:
    """Return the current user and their tenant.

    Reachable with a pending invite password so the client can prompt
    for a new one.
    """
    require_member(auth.user)
    return ProfileResponse(user=to_user_read(auth.user), tenant=to_tenant_read(auth.tenant))


@router.put("/profile", response_model=UserMessageResponse)
async def update_profile(
    body: ProfileUpdateRequest,
    auth: MemberAuth,
    session: Session,
) -> UserMessageResponse:
    user = await user_service.update_profile(session, auth.user, body.profile)
    return UserMessageResponse(message="Profile updated successfully", user=to_user_read(user))


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    auth: SessionAuth,
    session: Session,
) -> MessageResponse:
    require_member(auth.user)
    await user_service.change_password(
        session, auth.user, body.current_password, body.new_password
    )
    return MessageResponse(message="Password changed successfully")


@router.post("/invite", response_model=UserMessageResponse, status_code=status.HTTP_201_CREATED)
async def invite_user(
    body: UserInvite,
    auth: AdminAuth,
    session: Session,
) -> UserMessageResponse:
    """Create a user in the caller's tenant with the default invite password."""
    user = await user_service.invite_user(session, auth.tenant, body)
    return UserMessageResponse(message="User invited successfully", user=to_user_read(user))


@router.get("/users", response_model=user_service.UserPage)
async def list_users(
    auth: AdminAuth,
    session: Session,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    role: UserRole | None = None,
) -> user_service.UserPage:
    return await user_service.list_users(session, auth.tenant, page=page, limit=limit, role=role)
