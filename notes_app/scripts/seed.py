"""Seed demo tenants, users and notes.

Usage:
    python -m notes_app.scripts.seed            # create missing demo data
    python -m notes_app.scripts.seed --reset    # wipe notes/users/tenants first

Every demo account uses the invite default password, so this is for local
and demo environments only.
"""

import argparse
import asyncio
import logging

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from notes_app.core.config import get_settings
from notes_app.core.database import async_session_factory, init_db
from notes_app.core.security import hash_password
from notes_app.models.base import dump_json
from notes_app.models.note import Note
from notes_app.models.tenant import Tenant
from notes_app.models.user import User, UserRole
from notes_app.services.notes import compute_metadata

logger = logging.getLogger(__name__)

DEMO_TENANTS = [
    {
        "slug": "acme",
        "name": "Acme Corporation",
        "users": [
            ("admin@acme.com", UserRole.ADMIN, "Admin", "User"),
            ("user@acme.com", UserRole.MEMBER, "Regular", "User"),
        ],
        "notes": [
            {
                "author": "user@acme.com",
                "title": "Welcome to Acme Notes",
                "content": "This is your first note in the Acme tenant. "
                           "You can create, edit, and delete notes here.",
                "tags": ["welcome", "tutorial"],
                "color": "#DFD0B8",
            },
            {
                "author": "admin@acme.com",
                "title": "Meeting Notes - Project Alpha",
                "content": "Discussed project timeline and milestones. "
                           "Next meeting scheduled for next week.",
                "tags": ["meeting", "project"],
                "color": "#948979",
                "is_pinned": True,
            },
        ],
    },
    {
        "slug": "globex",
        "name": "Globex Corporation",
        "users": [
            ("admin@globex.com", UserRole.ADMIN, "Global", "Admin"),
            ("user@globex.com", UserRole.MEMBER, "Global", "Member"),
        ],
        "notes": [
            {
                "author": "user@globex.com",
                "title": "Globex Onboarding",
                "content": "Welcome to Globex Corporation notes system. "
                           "Here you can manage all your important notes.",
                "tags": ["onboarding", "welcome"],
                "color": "#DFD0B8",
            },
            {
                "author": "admin@globex.com",
                "title": "Quarterly Review Notes",
                "content": "Q4 performance metrics and goals for next quarter. "
                           "Revenue targets exceeded by 15%.",
                "tags": ["quarterly", "review"],
                "color": "#393E46",
                "is_pinned": True,
            },
        ],
    },
]


async def reset(session: AsyncSession) -> None:
    await session.execute(delete(Note))
    await session.execute(delete(User))
    await session.execute(delete(Tenant))
    await session.commit()
    logger.info("Cleared existing notes, users and tenants")


async def seed(session: AsyncSession) -> list[Tenant]:
    """Create the demo tenants that do not exist yet; returns those created."""
    password_hash = hash_password(get_settings().invite_default_password)
    created = []

    for entry in DEMO_TENANTS:
        existing = await session.execute(select(Tenant).where(Tenant.slug == entry["slug"]))
        if existing.scalar_one_or_none():
            logger.info("Tenant %s already present, skipping", entry["slug"])
            continue

        tenant = Tenant(slug=entry["slug"], name=entry["name"])
        session.add(tenant)
        await session.flush()

        users = {}
        for email, role, first_name, last_name in entry["users"]:
            user = User(
                tenant_id=tenant.id,
                email=email,
                password_hash=password_hash,
                role=role,
                first_name=first_name,
                last_name=last_name,
            )
            session.add(user)
            users[email] = user
        await session.flush()

        for data in entry["notes"]:
            word_count, reading_time = compute_metadata(data["content"])
            session.add(Note(
                tenant_id=tenant.id,
                user_id=users[data["author"]].id,
                title=data["title"],
                content=data["content"],
                tags_json=dump_json(data["tags"]),
                color=data["color"],
                is_pinned=data.get("is_pinned", False),
                word_count=word_count,
                reading_time=reading_time,
            ))

        await session.commit()
        created.append(tenant)
        logger.info("Seeded tenant %s with %d users", tenant.slug, len(users))

    return created


async def main(do_reset: bool) -> None:
    await init_db()
    async with async_session_factory() as session:
        if do_reset:
            await reset(session)
        await seed(session)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo tenants for local development")
    parser.add_argument("--reset", action="store_true", help="delete all existing data first")
    args = parser.parse_args()

    logging.basicConfig(level=get_settings().log_level.upper())
    asyncio.run(main(args.reset))
