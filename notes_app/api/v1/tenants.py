"""Tenant info, subscription and settings endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from notes_app.api.deps import AdminAuth, MemberAuth, Session
from notes_app.services import subscription as subscription_service
from notes_app.services import tenants as tenant_service
from notes_app.services.access import verify_tenant_slug

router = APIRouter(prefix="/tenants", tags=["tenants"])


# ── Schemas ──────────────────────────────────────────────────

class UpgradeResponse(BaseModel):
    message: str
    tenant: tenant_service.TenantInfo


class SettingsUpdateRequest(BaseModel):
    settings: dict[str, str]


class SettingsResponse(BaseModel):
    message: str
    settings: dict[str, str]


# ── Routes ───────────────────────────────────────────────────

@router.get("/current", response_model=tenant_service.TenantInfo)
async def get_current_tenant(auth: MemberAuth, session: Session) -> tenant_service.TenantInfo:
    """Returns the caller's tenant with live quota usage."""
    return await tenant_service.tenant_info(session, auth.tenant)


@router.get("/subscription", response_model=subscription_service.SubscriptionReport)
async def get_subscription_status(
    auth: MemberAuth, session: Session
) -> subscription_service.SubscriptionReport:
    return await subscription_service.status(session, auth.tenant)


@router.post("/{slug}/upgrade", response_model=UpgradeResponse)
async def upgrade_subscription(slug: str, auth: AdminAuth, session: Session) -> UpgradeResponse:
    """Upgrade the caller's own tenant to the pro plan."""
    verify_tenant_slug(auth.tenant, slug)
    tenant = await subscription_service.upgrade(session, auth.tenant)
    return UpgradeResponse(
        message="Subscription upgraded to Pro successfully",
        tenant=await tenant_service.tenant_info(session, tenant),
    )


@router.put("/settings", response_model=SettingsResponse)
async def update_settings(
    body: SettingsUpdateRequest,
    auth: AdminAuth,
    session: Session,
) -> SettingsResponse:
    settings = await tenant_service.update_settings(session, auth.tenant, body.settings)
    return SettingsResponse(message="Tenant settings updated successfully", settings=settings)
