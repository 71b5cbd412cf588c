"""Tenant info and settings."""

import re

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from notes_app.core.errors import ValidationError
from notes_app.models.base import dump_json, utcnow
from notes_app.models.tenant import (
    SubscriptionRead,
    Tenant,
    TenantRead,
    tenant_settings,
    to_tenant_read,
)
from notes_app.services import quota

SETTING_KEY_RE = re.compile(r"^[A-Za-z0-9_.\-]{1,100}$")
SETTING_VALUE_MAX_LENGTH = 1000


class TenantSubscriptionInfo(SubscriptionRead):
    current_note_count: int
    can_create_more: bool


class TenantInfo(TenantRead):
    subscription: TenantSubscriptionInfo  # type: ignore[assignment]


async def tenant_info(session: AsyncSession, tenant: Tenant) -> TenantInfo:
    base = to_tenant_read(tenant)
    snap = await quota.snapshot(session, tenant)
    return TenantInfo(
        **base.model_dump(exclude={"subscription"}),
        subscription=TenantSubscriptionInfo(
            **base.subscription.model_dump(),
            current_note_count=snap.current_count,
            can_create_more=snap.can_create_more,
        ),
    )


def validate_settings(settings: dict[str, str]) -> None:
    errors = []
    for key, value in settings.items():
        if not SETTING_KEY_RE.match(key):
            errors.append(f"Invalid setting key '{key}'")
        if len(value) > SETTING_VALUE_MAX_LENGTH:
            errors.append(f"Value for '{key}' exceeds {SETTING_VALUE_MAX_LENGTH} characters")
    if errors:
        raise ValidationError("Invalid settings", details=errors, field="settings")


async def update_settings(
    session: AsyncSession, tenant: Tenant, settings: dict[str, str]
) -> dict[str, str]:
    """Merge ``settings`` into the tenant's map and return the result."""
    validate_settings(settings)
    merged = {**tenant_settings(tenant), **settings}
    tenant.settings_json = dump_json(merged)
    tenant.updated_at = utcnow()
    session.add(tenant)
    await session.commit()
    await session.refresh(tenant)
    return tenant_settings(tenant)
