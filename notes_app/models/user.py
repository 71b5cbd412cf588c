"""User model — belongs to a tenant."""

import uuid
from datetime import datetime
from enum import StrEnum

from pydantic import EmailStr
from sqlmodel import Field, SQLModel

from notes_app.models.base import Timestamp, TimestampMixin, new_uuid


class UserRole(StrEnum):
    ADMIN = "admin"
    MEMBER = "member"


class User(TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    email: str = Field(max_length=320, unique=True, nullable=False, index=True)
    password_hash: str = Field(nullable=False)
    role: UserRole = Field(default=UserRole.MEMBER)

    # Profile
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    avatar: str | None = Field(default=None, max_length=2048)

    is_active: bool = Field(default=True)
    must_change_password: bool = Field(default=False)
    last_login_at: datetime | None = Field(default=None, sa_type=Timestamp)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


def normalize_email(email: str) -> str:
    return email.strip().lower()


# ── Pydantic schemas ─────────────────────────────────────────

class UserProfile(SQLModel):
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    avatar: str | None = Field(default=None, max_length=2048)


class UserProfileUpdate(SQLModel):
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    avatar: str | None = Field(default=None, max_length=2048)


class UserInvite(SQLModel):
    email: EmailStr
    role: UserRole = UserRole.MEMBER
    profile: UserProfile | None = None


class UserRead(SQLModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    email: str
    role: UserRole
    profile: UserProfile
    is_active: bool
    must_change_password: bool
    last_login_at: datetime | None
    created_at: datetime


def to_user_read(user: User) -> UserRead:
    """Project a user for API output; the password hash never leaves here."""
    return UserRead(
        id=user.id,
        tenant_id=user.tenant_id,
        email=user.email,
        role=user.role,
        profile=UserProfile(
            first_name=user.first_name,
            last_name=user.last_name,
            avatar=user.avatar,
        ),
        is_active=user.is_active,
        must_change_password=user.must_change_password,
        last_login_at=user.last_login_at,
        created_at=user.created_at,
    )
