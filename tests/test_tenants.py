"""Tests for tenant info, subscription and settings endpoints."""

import pytest
from httpx import AsyncClient


async def _fill(client: AsyncClient, headers: dict, count: int) -> None:
    for i in range(count):
        resp = await client.post(
            "/v1/notes", json={"title": f"n{i}", "content": "x"}, headers=headers
        )
        assert resp.status_code == 201


@pytest.mark.asyncio
async def test_current_tenant(client: AsyncClient, acme):
    await _fill(client, acme.member.headers, 2)

    resp = await client.get("/v1/tenants/current", headers=acme.member.headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["slug"] == "acme"
    assert data["name"] == "Acme Corporation"
    sub = data["subscription"]
    assert sub["plan"] == "free"
    assert sub["note_limit"] == 3
    assert sub["current_note_count"] == 2
    assert sub["can_create_more"] is True
    assert sub["upgraded_at"] is None


@pytest.mark.asyncio
async def test_subscription_status_free(client: AsyncClient, acme):
    await _fill(client, acme.member.headers, 2)

    resp = await client.get("/v1/tenants/subscription", headers=acme.member.headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["subscription"]["current_note_count"] == 2
    assert data["subscription"]["is_unlimited"] is False
    assert data["limits"] == {"notes_remaining": 1, "percentage_used": 67}


@pytest.mark.asyncio
async def test_upgrade_flow(client: AsyncClient, acme):
    await _fill(client, acme.member.headers, 3)
    resp = await client.post(
        "/v1/notes", json={"title": "blocked", "content": "x"}, headers=acme.member.headers
    )
    assert resp.status_code == 403

    resp = await client.post("/v1/tenants/acme/upgrade", headers=acme.admin.headers)
    assert resp.status_code == 200
    tenant = resp.json()["tenant"]
    assert tenant["subscription"]["plan"] == "pro"
    assert tenant["subscription"]["note_limit"] == -1
    assert tenant["subscription"]["upgraded_at"] is not None
    assert tenant["subscription"]["current_note_count"] == 3
    assert tenant["subscription"]["can_create_more"] is True

    resp = await client.post(
        "/v1/notes", json={"title": "now fine", "content": "x"}, headers=acme.member.headers
    )
    assert resp.status_code == 201

    resp = await client.get("/v1/tenants/subscription", headers=acme.member.headers)
    data = resp.json()
    assert data["subscription"]["is_unlimited"] is True
    assert data["limits"] == {"notes_remaining": 0, "percentage_used": 0}


@pytest.mark.asyncio
async def test_second_upgrade_fails_without_changes(client: AsyncClient, acme):
    resp = await client.post("/v1/tenants/acme/upgrade", headers=acme.admin.headers)
    assert resp.status_code == 200
    first_upgraded_at = resp.json()["tenant"]["subscription"]["upgraded_at"]

    resp = await client.post("/v1/tenants/acme/upgrade", headers=acme.admin.headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "ALREADY_PRO_PLAN"

    resp = await client.get("/v1/tenants/current", headers=acme.admin.headers)
    sub = resp.json()["subscription"]
    assert sub["plan"] == "pro"
    assert sub["upgraded_at"] == first_upgraded_at


@pytest.mark.asyncio
async def test_upgrade_requires_admin(client: AsyncClient, acme):
    resp = await client.post("/v1/tenants/acme/upgrade", headers=acme.member.headers)
    assert resp.status_code == 403
    assert resp.json()["code"] == "ADMIN_REQUIRED"


@pytest.mark.asyncio
async def test_upgrade_other_tenant_denied(client: AsyncClient, acme, globex):
    resp = await client.post("/v1/tenants/globex/upgrade", headers=acme.admin.headers)
    assert resp.status_code == 403
    assert resp.json()["code"] == "TENANT_ACCESS_DENIED"

    resp = await client.get("/v1/tenants/current", headers=globex.admin.headers)
    assert resp.json()["subscription"]["plan"] == "free"


@pytest.mark.asyncio
async def test_upgrade_slug_is_case_normalized(client: AsyncClient, acme):
    resp = await client.post("/v1/tenants/ACME/upgrade", headers=acme.admin.headers)
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_update_settings_merges(client: AsyncClient, acme):
    resp = await client.put("/v1/tenants/settings", json={
        "settings": {"theme": "dark", "locale": "en"},
    }, headers=acme.admin.headers)
    assert resp.status_code == 200
    assert resp.json()["settings"] == {"theme": "dark", "locale": "en"}

    resp = await client.put("/v1/tenants/settings", json={
        "settings": {"theme": "light"},
    }, headers=acme.admin.headers)
    assert resp.json()["settings"] == {"theme": "light", "locale": "en"}

    resp = await client.get("/v1/tenants/current", headers=acme.member.headers)
    assert resp.json()["settings"] == {"theme": "light", "locale": "en"}


@pytest.mark.asyncio
async def test_update_settings_validation(client: AsyncClient, acme):
    resp = await client.put("/v1/tenants/settings", json={}, headers=acme.admin.headers)
    assert resp.status_code == 400

    resp = await client.put("/v1/tenants/settings", json={
        "settings": {"nested": {"a": 1}},
    }, headers=acme.admin.headers)
    assert resp.status_code == 400

    resp = await client.put("/v1/tenants/settings", json={
        "settings": {"bad key!": "x"},
    }, headers=acme.admin.headers)
    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["field"] == "settings"


@pytest.mark.asyncio
async def test_member_cannot_update_settings(client: AsyncClient, acme):
    resp = await client.put("/v1/tenants/settings", json={
        "settings": {"theme": "dark"},
    }, headers=acme.member.headers)
    assert resp.status_code == 403
