"""Note quota accounting per tenant."""

import uuid

from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from notes_app.core.errors import NoteLimitReached
from notes_app.models.note import Note
from notes_app.models.tenant import Plan, Tenant


class QuotaSnapshot(BaseModel):
    plan: Plan
    note_limit: int
    current_count: int
    can_create_more: bool


async def count_active(session: AsyncSession, tenant_id: uuid.UUID) -> int:
    """Number of the tenant's notes that are not archived."""
    stmt = (
        select(func.count())
        .select_from(Note)
        .where(Note.tenant_id == tenant_id, Note.is_archived.is_(False))  # type: ignore[attr-defined]
    )
    return (await session.execute(stmt)).scalar_one()


def can_create(tenant: Tenant, current_count: int) -> bool:
    if tenant.plan == Plan.PRO:
        return True
    return current_count < tenant.note_limit


async def lock_tenant(session: AsyncSession, tenant: Tenant) -> Tenant:
    """Re-read the tenant row under ``SELECT ... FOR UPDATE``.

    Holding the row lock until commit serializes quota decisions for one
    tenant. SQLite has no row locks and ignores the clause.
    """
    stmt = (
        select(Tenant)
        .where(Tenant.id == tenant.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return (await session.execute(stmt)).scalar_one()


async def ensure_can_create(session: AsyncSession, tenant: Tenant) -> int:
    """Recount active notes and raise NoteLimitReached if the quota is full.

    Returns the fresh count. Callers should hold the tenant lock
    (see ``lock_tenant``) until the new note is committed.
    """
    current = await count_active(session, tenant.id)
    if not can_create(tenant, current):
        raise NoteLimitReached(current_count=current, limit=tenant.note_limit, plan=tenant.plan)
    return current


async def snapshot(session: AsyncSession, tenant: Tenant) -> QuotaSnapshot:
    current = await count_active(session, tenant.id)
    return QuotaSnapshot(
        plan=tenant.plan,
        note_limit=tenant.note_limit,
        current_count=current,
        can_create_more=can_create(tenant, current),
    )
