"""Credential verification and session token resolution."""

import logging
import uuid

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from notes_app.core.errors import InactiveAccount, InvalidCredentials, InvalidToken, InvalidUser
from notes_app.core.security import create_jwt, decode_jwt, dummy_verify, verify_password
from notes_app.models.base import utcnow
from notes_app.models.tenant import Tenant, TenantRead, to_tenant_read
from notes_app.models.user import User, UserRead, normalize_email, to_user_read

logger = logging.getLogger(__name__)


class LoginResult(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
    tenant: TenantRead


async def authenticate(session: AsyncSession, email: str, password: str) -> LoginResult:
    """Verify an email/password pair and issue a session token.

    Unknown email and wrong password fail identically. The last-login
    timestamp is recorded best-effort; a failed write does not fail the login.
    """
    result = await session.execute(select(User).where(User.email == normalize_email(email)))
    user = result.scalar_one_or_none()

    if user is None:
        dummy_verify()
        logger.warning("Login failed: unknown email")
        raise InvalidCredentials()
    if not verify_password(password, user.password_hash):
        logger.warning("Login failed: bad password for user %s", user.id)
        raise InvalidCredentials()
    if not user.is_active:
        raise InactiveAccount()

    tenant = await session.get(Tenant, user.tenant_id)
    if tenant is None:
        raise InvalidUser()

    token = create_jwt(subject=str(user.id), tenant_id=str(tenant.id))

    # Projections are built before the commit; a rollback expires the ORM objects.
    previous_login = user.last_login_at
    user.last_login_at = utcnow()
    login = LoginResult(
        access_token=token,
        user=to_user_read(user),
        tenant=to_tenant_read(tenant),
    )
    try:
        session.add(user)
        await session.commit()
    except SQLAlchemyError:
        logger.warning("Could not record last login for user %s", login.user.id, exc_info=True)
        await session.rollback()
        login.user = login.user.model_copy(update={"last_login_at": previous_login})

    logger.info("User %s logged in to tenant %s", login.user.id, login.tenant.slug)
    return login


async def resolve_token(session: AsyncSession, token: str) -> tuple[User, Tenant]:
    """Turn a bearer token into the (user, tenant) pair it names."""
    payload = decode_jwt(token)
    try:
        user_id = uuid.UUID(payload["sub"])
        tenant_id = uuid.UUID(payload["tid"])
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidToken("Malformed access token") from exc

    user = await session.get(User, user_id)
    if user is None or not user.is_active:
        raise InvalidUser()
    if user.tenant_id != tenant_id:
        raise InvalidToken()

    tenant = await session.get(Tenant, user.tenant_id)
    if tenant is None:
        raise InvalidUser()
    return user, tenant
