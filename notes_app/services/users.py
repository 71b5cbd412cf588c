"""User directory — profiles, passwords, invitations and listings."""

import logging

from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from notes_app.core.config import get_settings
from notes_app.core.errors import InvalidCurrentPassword, UserAlreadyExists
from notes_app.core.security import hash_password, verify_password
from notes_app.models.base import Pagination, paginate, utcnow
from notes_app.models.tenant import Tenant
from notes_app.models.user import (
    User,
    UserInvite,
    UserProfileUpdate,
    UserRead,
    UserRole,
    normalize_email,
    to_user_read,
)

logger = logging.getLogger(__name__)


class UserPage(BaseModel):
    users: list[UserRead]
    pagination: Pagination


async def update_profile(session: AsyncSession, user: User, body: UserProfileUpdate) -> User:
    for field, value in body.model_dump(exclude_unset=True).items():
        if field != "avatar" and value is None:
            continue
        setattr(user, field, value.strip() if isinstance(value, str) else value)

    user.updated_at = utcnow()
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def change_password(
    session: AsyncSession, user: User, current_password: str, new_password: str
) -> None:
    if not verify_password(current_password, user.password_hash):
        raise InvalidCurrentPassword()

    user.password_hash = hash_password(new_password)
    user.must_change_password = False
    user.updated_at = utcnow()
    session.add(user)
    await session.commit()


async def invite_user(session: AsyncSession, tenant: Tenant, body: UserInvite) -> User:
    """Create a user in the tenant with the configured default password.

    The invitee has to change that password before using anything else.
    """
    email = normalize_email(body.email)
    existing = await session.execute(select(User).where(User.email == email))
    if existing.scalar_one_or_none():
        raise UserAlreadyExists(field="email")

    profile = body.profile
    user = User(
        tenant_id=tenant.id,
        email=email,
        password_hash=hash_password(get_settings().invite_default_password),
        role=body.role,
        first_name=profile.first_name.strip() if profile else "",
        last_name=profile.last_name.strip() if profile else "",
        avatar=profile.avatar if profile else None,
        must_change_password=True,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    logger.info("Invited %s (%s) to tenant %s", user.id, user.role, tenant.slug)
    return user


async def list_users(
    session: AsyncSession,
    tenant: Tenant,
    page: int = 1,
    limit: int = 10,
    role: UserRole | None = None,
) -> UserPage:
    conditions = [User.tenant_id == tenant.id]
    if role is not None:
        conditions.append(User.role == role)

    total = (await session.execute(
        select(func.count()).select_from(User).where(*conditions)
    )).scalar_one()

    stmt = (
        select(User)
        .where(*conditions)
        .order_by(User.created_at.desc())  # type: ignore[attr-defined]
        .offset((page - 1) * limit)
        .limit(limit)
    )
    users = (await session.execute(stmt)).scalars().all()
    return UserPage(
        users=[to_user_read(u) for u in users],
        pagination=paginate(page, limit, total),
    )
