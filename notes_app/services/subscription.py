"""Subscription plan transitions and usage reporting."""

import logging
from datetime import datetime

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from notes_app.core.errors import AlreadyPro
from notes_app.models.base import utcnow
from notes_app.models.tenant import UNLIMITED, Plan, Tenant
from notes_app.services import quota

logger = logging.getLogger(__name__)


class SubscriptionStatus(BaseModel):
    plan: Plan
    note_limit: int
    current_note_count: int
    can_create_more: bool
    created_at: datetime
    upgraded_at: datetime | None
    is_unlimited: bool


class SubscriptionLimits(BaseModel):
    notes_remaining: int
    percentage_used: int


class SubscriptionReport(BaseModel):
    subscription: SubscriptionStatus
    limits: SubscriptionLimits


def percentage_used(tenant: Tenant, current_count: int) -> int:
    """Share of the quota in use, rounded half up; 0 when unlimited."""
    if tenant.plan == Plan.PRO:
        return 0
    limit = tenant.note_limit
    if limit <= 0:
        return 100
    return (current_count * 100 + limit // 2) // limit


def notes_remaining(tenant: Tenant, current_count: int) -> int:
    if tenant.plan == Plan.PRO:
        return 0
    return max(0, tenant.note_limit - current_count)


async def upgrade(session: AsyncSession, tenant: Tenant) -> Tenant:
    """Move a free tenant to pro. There is no downgrade."""
    if tenant.plan == Plan.PRO:
        raise AlreadyPro()

    tenant.plan = Plan.PRO
    tenant.note_limit = UNLIMITED
    tenant.upgraded_at = utcnow()
    tenant.updated_at = tenant.upgraded_at
    session.add(tenant)
    await session.commit()
    await session.refresh(tenant)
    logger.info("Tenant %s upgraded to pro", tenant.slug)
    return tenant


async def status(session: AsyncSession, tenant: Tenant) -> SubscriptionReport:
    current = await quota.count_active(session, tenant.id)
    return SubscriptionReport(
        subscription=SubscriptionStatus(
            plan=tenant.plan,
            note_limit=tenant.note_limit,
            current_note_count=current,
            can_create_more=quota.can_create(tenant, current),
            created_at=tenant.subscription_created_at,
            upgraded_at=tenant.upgraded_at,
            is_unlimited=tenant.plan == Plan.PRO,
        ),
        limits=SubscriptionLimits(
            notes_remaining=notes_remaining(tenant, current),
            percentage_used=percentage_used(tenant, current),
        ),
    )
