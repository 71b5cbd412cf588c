"""Role gate and tenant isolation checks.

Every note query is already filtered by the caller's tenant id, so a note
from another tenant is simply "not found". The ownership check here runs
after such a fetch and restricts members to the notes they authored;
admins may act on any note inside their own tenant.
"""

from notes_app.core.errors import (
    AdminRequired,
    MemberRequired,
    NoteAccessDenied,
    TenantAccessDenied,
)
from notes_app.models.note import Note
from notes_app.models.tenant import Tenant
from notes_app.models.user import User, UserRole


def require_admin(user: User) -> None:
    if user.role != UserRole.ADMIN:
        raise AdminRequired()


def require_member(user: User) -> None:
    if user.role not in (UserRole.ADMIN, UserRole.MEMBER):
        raise MemberRequired()


def verify_tenant_slug(tenant: Tenant, slug: str) -> None:
    """Reject a slug path parameter that names any tenant but the caller's."""
    if slug.strip().lower() != tenant.slug:
        raise TenantAccessDenied()


def can_access_note(note: Note, user: User) -> bool:
    return note.tenant_id == user.tenant_id and (user.is_admin or note.user_id == user.id)


def ensure_note_access(note: Note, user: User) -> None:
    if not can_access_note(note, user):
        raise NoteAccessDenied()
