"""Shared test fixtures — async SQLite in-memory DB + test client."""

from collections.abc import AsyncGenerator
from dataclasses import dataclass

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

# Import all models so metadata is populated
import notes_app.models  # noqa: F401
from notes_app.core.database import get_session
from notes_app.core.security import hash_password
from notes_app.main import app
from notes_app.models.tenant import Plan, Tenant
from notes_app.models.user import User, UserRole

PASSWORD = "testpass123"


@dataclass
class Account:
    user: User
    headers: dict[str, str]


@dataclass
class TenantSetup:
    tenant: Tenant
    admin: Account
    member: Account


@pytest.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite://", echo=False, poolclass=StaticPool)
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def test_session_factory(engine):
    """Session factory bound to the test SQLite engine."""
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with test_session_factory() as sess:
        yield sess
        await sess.rollback()


@pytest.fixture
async def client(session) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX async test client with DB session override."""

    async def _override_session():
        yield session

    app.dependency_overrides[get_session] = _override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_tenant(session):
    """Factory: insert a tenant directly (there is no public signup)."""

    async def _make(slug: str, note_limit: int = 3, plan: Plan = Plan.FREE) -> Tenant:
        tenant = Tenant(
            slug=slug,
            name=f"{slug.title()} Corporation",
            plan=plan,
            note_limit=-1 if plan == Plan.PRO else note_limit,
        )
        session.add(tenant)
        await session.commit()
        await session.refresh(tenant)
        return tenant

    return _make


@pytest.fixture
def make_user(session):
    async def _make(
        tenant: Tenant,
        email: str,
        role: UserRole = UserRole.MEMBER,
        password: str = PASSWORD,
        **fields,
    ) -> User:
        user = User(
            tenant_id=tenant.id,
            email=email,
            password_hash=hash_password(password),
            role=role,
            **fields,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _make


@pytest.fixture
def login(client):
    """Log in through the API and return auth headers."""

    async def _login(email: str, password: str = PASSWORD) -> dict[str, str]:
        resp = await client.post("/v1/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _login


@pytest.fixture
def setup_tenant(make_tenant, make_user, login):
    """Factory: tenant with one admin and one member, both logged in."""

    async def _setup(slug: str, note_limit: int = 3, plan: Plan = Plan.FREE) -> TenantSetup:
        tenant = await make_tenant(slug, note_limit=note_limit, plan=plan)
        admin = await make_user(
            tenant, f"admin@{slug}.com", UserRole.ADMIN, first_name="Ada", last_name="Admin"
        )
        member = await make_user(
            tenant, f"user@{slug}.com", UserRole.MEMBER, first_name="Max", last_name="Member"
        )
        return TenantSetup(
            tenant=tenant,
            admin=Account(admin, await login(admin.email)),
            member=Account(member, await login(member.email)),
        )

    return _setup


@pytest.fixture
async def acme(setup_tenant) -> TenantSetup:
    return await setup_tenant("acme")


@pytest.fixture
async def globex(setup_tenant) -> TenantSetup:
    return await setup_tenant("globex")
