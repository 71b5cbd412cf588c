"""Import all models so SQLModel.metadata picks them up."""

from notes_app.models.note import Note, NoteCreate, NoteMetadata, NoteRead, NoteUpdate
from notes_app.models.tenant import UNLIMITED, Plan, SubscriptionRead, Tenant, TenantRead
from notes_app.models.user import (
    User,
    UserInvite,
    UserProfile,
    UserProfileUpdate,
    UserRead,
    UserRole,
)

__all__ = [
    "Note",
    "NoteCreate",
    "NoteMetadata",
    "NoteRead",
    "NoteUpdate",
    "Plan",
    "SubscriptionRead",
    "Tenant",
    "TenantRead",
    "UNLIMITED",
    "User",
    "UserInvite",
    "UserProfile",
    "UserProfileUpdate",
    "UserRead",
    "UserRole",
]
