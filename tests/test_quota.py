"""Quota accounting: active counts, free-plan limits and pro plans."""

import pytest
from httpx import AsyncClient

from notes_app.models.note import Note
from notes_app.models.tenant import UNLIMITED, Plan, Tenant
from notes_app.services import quota


async def _create(client: AsyncClient, headers: dict, title: str = "note"):
    return await client.post(
        "/v1/notes", json={"title": title, "content": "body"}, headers=headers
    )


def test_can_create_free_plan_boundary():
    tenant = Tenant(slug="t", name="T", plan=Plan.FREE, note_limit=3)
    assert quota.can_create(tenant, 0)
    assert quota.can_create(tenant, 2)
    assert not quota.can_create(tenant, 3)
    assert not quota.can_create(tenant, 4)


def test_can_create_pro_plan_always():
    tenant = Tenant(slug="t", name="T", plan=Plan.PRO, note_limit=UNLIMITED)
    assert quota.can_create(tenant, 0)
    assert quota.can_create(tenant, 10_000)


def test_can_create_zero_limit():
    tenant = Tenant(slug="t", name="T", plan=Plan.FREE, note_limit=0)
    assert not quota.can_create(tenant, 0)


@pytest.mark.asyncio
async def test_count_active_ignores_archived_and_other_tenants(session, make_tenant, make_user):
    t1 = await make_tenant("count-one")
    t2 = await make_tenant("count-two")
    u1 = await make_user(t1, "a@count-one.com")
    u2 = await make_user(t2, "b@count-two.com")

    session.add_all([
        Note(tenant_id=t1.id, user_id=u1.id, title="a", content="x"),
        Note(tenant_id=t1.id, user_id=u1.id, title="b", content="x"),
        Note(tenant_id=t1.id, user_id=u1.id, title="c", content="x", is_archived=True),
        Note(tenant_id=t2.id, user_id=u2.id, title="d", content="x"),
    ])
    await session.commit()

    assert await quota.count_active(session, t1.id) == 2
    assert await quota.count_active(session, t2.id) == 1


@pytest.mark.asyncio
async def test_note_limit_reached(client: AsyncClient, acme):
    """Limit 3 with 3 active notes → 403 with count and limit."""
    for i in range(3):
        resp = await _create(client, acme.member.headers, title=f"n{i}")
        assert resp.status_code == 201

    resp = await _create(client, acme.admin.headers, title="one too many")
    assert resp.status_code == 403
    body = resp.json()
    assert body["code"] == "NOTE_LIMIT_REACHED"
    assert body["current_count"] == 3
    assert body["limit"] == 3
    assert body["subscription"] == "free"
    assert "3 notes" in body["error"]


@pytest.mark.asyncio
async def test_archiving_frees_quota(client: AsyncClient, acme):
    ids = []
    for i in range(3):
        resp = await _create(client, acme.member.headers, title=f"n{i}")
        ids.append(resp.json()["id"])

    resp = await client.put(
        f"/v1/notes/{ids[0]}", json={"is_archived": True}, headers=acme.member.headers
    )
    assert resp.status_code == 200

    resp = await _create(client, acme.member.headers, title="fits again")
    assert resp.status_code == 201

    # Restoring the archived note would exceed the quota
    resp = await client.put(
        f"/v1/notes/{ids[0]}", json={"is_archived": False}, headers=acme.member.headers
    )
    assert resp.status_code == 403
    assert resp.json()["code"] == "NOTE_LIMIT_REACHED"

    resp = await client.get("/v1/notes?archived=true", headers=acme.member.headers)
    assert [n["id"] for n in resp.json()["notes"]] == [ids[0]]


@pytest.mark.asyncio
async def test_deleting_frees_quota(client: AsyncClient, acme):
    ids = [(await _create(client, acme.member.headers)).json()["id"] for _ in range(3)]
    assert (await _create(client, acme.member.headers)).status_code == 403

    resp = await client.delete(f"/v1/notes/{ids[1]}", headers=acme.member.headers)
    assert resp.status_code == 204
    assert (await _create(client, acme.member.headers)).status_code == 201


@pytest.mark.asyncio
async def test_quota_is_per_tenant(client: AsyncClient, acme, globex):
    for _ in range(3):
        assert (await _create(client, acme.member.headers)).status_code == 201
    assert (await _create(client, acme.member.headers)).status_code == 403
    assert (await _create(client, globex.member.headers)).status_code == 201


@pytest.mark.asyncio
async def test_pro_tenant_is_unlimited(client: AsyncClient, setup_tenant):
    team = await setup_tenant("unlimited", plan=Plan.PRO)
    for i in range(6):
        resp = await _create(client, team.member.headers, title=f"n{i}")
        assert resp.status_code == 201

    resp = await client.get("/v1/notes", headers=team.member.headers)
    assert resp.json()["subscription"] == {
        "plan": "pro",
        "note_limit": -1,
        "current_count": 6,
        "can_create_more": True,
    }
