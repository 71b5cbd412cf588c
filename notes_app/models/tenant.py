"""Tenant model — top-level isolation boundary, carries the subscription."""

import uuid
from datetime import datetime
from enum import StrEnum

from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from notes_app.core.config import get_settings
from notes_app.models.base import Timestamp, TimestampMixin, load_json, new_uuid, utcnow

# note_limit value for plans without a quota
UNLIMITED = -1


class Plan(StrEnum):
    FREE = "free"
    PRO = "pro"


def _free_plan_limit() -> int:
    return get_settings().free_plan_note_limit


class Tenant(TimestampMixin, SQLModel, table=True):
    __tablename__ = "tenants"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    name: str = Field(max_length=255, nullable=False)
    slug: str = Field(max_length=100, unique=True, nullable=False, index=True)

    # Subscription (embedded)
    plan: Plan = Field(default=Plan.FREE)
    note_limit: int = Field(default_factory=_free_plan_limit)
    subscription_created_at: datetime = Field(default_factory=utcnow, sa_type=Timestamp, nullable=False)
    upgraded_at: datetime | None = Field(default=None, sa_type=Timestamp)

    # String → string map stored as JSON text.
    settings_json: str = Field(default="{}", sa_column=Column(Text, nullable=False, server_default="{}"))


# ── Pydantic schemas ─────────────────────────────────────────

class SubscriptionRead(SQLModel):
    plan: Plan
    note_limit: int
    created_at: datetime
    upgraded_at: datetime | None


class TenantRead(SQLModel):
    id: uuid.UUID
    slug: str
    name: str
    subscription: SubscriptionRead
    settings: dict[str, str]
    created_at: datetime
    updated_at: datetime


def tenant_settings(tenant: Tenant) -> dict[str, str]:
    return load_json(tenant.settings_json, {})  # type: ignore[return-value]


def to_subscription_read(tenant: Tenant) -> SubscriptionRead:
    return SubscriptionRead(
        plan=tenant.plan,
        note_limit=tenant.note_limit,
        created_at=tenant.subscription_created_at,
        upgraded_at=tenant.upgraded_at,
    )


def to_tenant_read(tenant: Tenant) -> TenantRead:
    return TenantRead(
        id=tenant.id,
        slug=tenant.slug,
        name=tenant.name,
        subscription=to_subscription_read(tenant),
        settings=tenant_settings(tenant),
        created_at=tenant.created_at,
        updated_at=tenant.updated_at,
    )
