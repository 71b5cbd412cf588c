"""FastAPI dependencies for authentication, roles and tenant resolution."""

import logging
import uuid
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from notes_app.core.database import get_session
from notes_app.core.errors import AppError, MissingToken, PasswordChangeRequired
from notes_app.models.tenant import Tenant
from notes_app.models.user import User, UserRole
from notes_app.services.access import require_admin, require_member
from notes_app.services.auth import resolve_token

logger = logging.getLogger(__name__)

# auto_error=False so a missing header maps to MISSING_TOKEN instead of a bare 403
bearer_scheme = HTTPBearer(auto_error=False)


class AuthContext:
    """Resolved identity carried through a request."""

    __slots__ = ("user", "tenant")

    def __init__(self, user: User, tenant: Tenant) -> None:
        self.user = user
        self.tenant = tenant

    @property
    def user_id(self) -> uuid.UUID:
        return self.user.id

    @property
    def tenant_id(self) -> uuid.UUID:
        return self.tenant.id

    @property
    def user_role(self) -> UserRole:
        return self.user.role


Credentials = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]
Session = Annotated[AsyncSession, Depends(get_session)]


async def get_session_context(credentials: Credentials, session: Session) -> AuthContext:
    """Resolve a bearer JWT to an AuthContext.

    Users still holding an invite password are let through; only the
    profile and change-password routes should depend on this directly.
    """
    if credentials is None or not credentials.credentials:
        raise MissingToken()
    user, tenant = await resolve_token(session, credentials.credentials)
    return AuthContext(user=user, tenant=tenant)


async def get_auth_context(
    ctx: Annotated[AuthContext, Depends(get_session_context)],
) -> AuthContext:
    if ctx.user.must_change_password:
        raise PasswordChangeRequired()
    return ctx


async def get_optional_auth_context(
    credentials: Credentials, session: Session
) -> AuthContext | None:
    """Like get_auth_context but yields None instead of failing."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        user, tenant = await resolve_token(session, credentials.credentials)
    except AppError as exc:
        logger.debug("Ignoring unusable optional token: %s", exc.code)
        return None
    return AuthContext(user=user, tenant=tenant)


async def get_member_context(
    ctx: Annotated[AuthContext, Depends(get_auth_context)],
) -> AuthContext:
    require_member(ctx.user)
    return ctx


async def get_admin_context(
    ctx: Annotated[AuthContext, Depends(get_auth_context)],
) -> AuthContext:
    require_admin(ctx.user)
    return ctx


# Typed shorthand for use in route signatures
SessionAuth = Annotated[AuthContext, Depends(get_session_context)]
Auth = Annotated[AuthContext, Depends(get_auth_context)]
OptionalAuth = Annotated[AuthContext | None, Depends(get_optional_auth_context)]
MemberAuth = Annotated[AuthContext, Depends(get_member_context)]
AdminAuth = Annotated[AuthContext, Depends(get_admin_context)]
