"""Note store — tenant-scoped CRUD with derived metadata and quota checks."""

from __future__ import annotations

import math
import re
import uuid
from dataclasses import dataclass, field

from pydantic import BaseModel
from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from notes_app.core.config import get_settings
from notes_app.core.errors import InvalidColor, NoteNotFound, ValidationError
from notes_app.models.base import dump_json, utcnow
from notes_app.models.note import Note, NoteCreate, NoteRead, NoteUpdate, to_note_read
from notes_app.models.tenant import Tenant
from notes_app.models.user import User
from notes_app.services import quota
from notes_app.services.access import ensure_note_access

WORDS_PER_MINUTE = 200

COLOR_RE = re.compile(r"^#([0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})$")

SORT_COLUMNS = {
    "created_at": Note.created_at,
    "updated_at": Note.updated_at,
    "title": Note.title,
    "word_count": Note.word_count,
}
DEFAULT_SORT = "-created_at"


# ── Pure helpers ─────────────────────────────────────────────

def compute_metadata(content: str) -> tuple[int, int]:
    """Return (word_count, reading_time_minutes) for a note body."""
    word_count = len(content.split())
    return word_count, math.ceil(word_count / WORDS_PER_MINUTE)


def validate_color(color: str) -> str:
    if not COLOR_RE.match(color):
        raise InvalidColor(color)
    return color


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Trim and lower-case tags, dropping blanks and repeats."""
    seen: list[str] = []
    for tag in tags or []:
        cleaned = tag.strip().lower()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


def parse_sort(sort: str) -> list:
    """Translate ``title`` / ``-created_at`` style keys to ORDER BY clauses.

    The note id is always appended so equal sort values page stably.
    """
    descending = sort.startswith("-")
    key = sort.lstrip("-")
    column = SORT_COLUMNS.get(key)
    if column is None:
        raise ValidationError(
            f"Unknown sort key '{key}'",
            field="sort",
            details=[f"sort must be one of: {', '.join(SORT_COLUMNS)}"],
        )
    primary = column.desc() if descending else column.asc()  # type: ignore[attr-defined]
    return [primary, Note.id.asc()]  # type: ignore[attr-defined]


def _set_content(note: Note, content: str) -> None:
    note.content = content
    note.word_count, note.reading_time = compute_metadata(content)


# ── Listing types ────────────────────────────────────────────

@dataclass
class NoteFilters:
    page: int = 1
    limit: int = 10
    sort: str = DEFAULT_SORT
    archived: bool = False
    pinned: bool | None = None
    user_id: uuid.UUID | None = None
    tags: list[str] = field(default_factory=list)


@dataclass
class NotePage:
    notes: list[tuple[Note, User]]
    total: int
    quota: quota.QuotaSnapshot


class AuthorBreakdown(BaseModel):
    user_id: uuid.UUID
    email: str
    name: str
    count: int


class NoteStats(BaseModel):
    total_notes: int
    archived_notes: int
    pinned_notes: int
    total_words: int
    average_words_per_note: int
    notes_by_user: list[AuthorBreakdown] | None = None


# ── Operations ───────────────────────────────────────────────

async def create_note(
    session: AsyncSession, tenant: Tenant, author: User, body: NoteCreate
) -> Note:
    """Create a note after a fresh quota check.

    Tenant and author always come from the authenticated context.
    """
    color = validate_color(body.color) if body.color else get_settings().default_note_color

    tenant = await quota.lock_tenant(session, tenant)
    await quota.ensure_can_create(session, tenant)

    note = Note(
        tenant_id=tenant.id,
        user_id=author.id,
        title=body.title,
        content=body.content,
        tags_json=dump_json(normalize_tags(body.tags)),
        color=color,
        is_pinned=body.is_pinned,
    )
    _set_content(note, body.content)
    session.add(note)
    await session.commit()
    await session.refresh(note)
    return note


async def list_notes(
    session: AsyncSession, tenant: Tenant, caller: User, filters: NoteFilters
) -> NotePage:
    conditions = [Note.tenant_id == tenant.id, Note.is_archived == filters.archived]

    # Members only ever see their own notes; admins may narrow by author.
    if not caller.is_admin:
        conditions.append(Note.user_id == caller.id)
    elif filters.user_id is not None:
        conditions.append(Note.user_id == filters.user_id)

    if filters.pinned is not None:
        conditions.append(Note.is_pinned == filters.pinned)

    wanted = normalize_tags(filters.tags)
    if wanted:
        # Each tag is matched as its JSON-encoded string inside the array text.
        conditions.append(or_(*(
            Note.tags_json.contains(dump_json(tag), autoescape=True)  # type: ignore[union-attr]
            for tag in wanted
        )))

    order = parse_sort(filters.sort)

    total = (await session.execute(
        select(func.count()).select_from(Note).where(*conditions)
    )).scalar_one()

    stmt = (
        select(Note, User)
        .join(User, User.id == Note.user_id)  # type: ignore[arg-type]
        .where(*conditions)
        .order_by(*order)
        .offset((filters.page - 1) * filters.limit)
        .limit(filters.limit)
    )
    notes = [(note, author) for note, author in (await session.execute(stmt)).all()]

    return NotePage(notes=notes, total=total, quota=await quota.snapshot(session, tenant))


async def get_note(
    session: AsyncSession, tenant: Tenant, caller: User, note_id: uuid.UUID
) -> Note:
    note = await _get_or_404(session, note_id, tenant.id)
    ensure_note_access(note, caller)
    return note


async def update_note(
    session: AsyncSession,
    tenant: Tenant,
    caller: User,
    note_id: uuid.UUID,
    body: NoteUpdate,
) -> Note:
    """Apply a partial update; only supplied fields change."""
    note = await get_note(session, tenant, caller, note_id)
    patch = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}

    # Validate everything before the note is touched.
    if "color" in patch:
        validate_color(patch["color"])
    if note.is_archived and patch.get("is_archived") is False:
        # Restoring a note brings it back into the active count.
        locked = await quota.lock_tenant(session, tenant)
        await quota.ensure_can_create(session, locked)

    if "content" in patch and patch["content"] != note.content:
        _set_content(note, patch.pop("content"))
    patch.pop("content", None)
    if "tags" in patch:
        note.tags_json = dump_json(normalize_tags(patch.pop("tags")))
    for name, value in patch.items():
        setattr(note, name, value)

    note.updated_at = utcnow()
    session.add(note)
    await session.commit()
    await session.refresh(note)
    return note


async def delete_note(
    session: AsyncSession, tenant: Tenant, caller: User, note_id: uuid.UUID
) -> None:
    note = await get_note(session, tenant, caller, note_id)
    await session.delete(note)
    await session.commit()


async def note_stats(session: AsyncSession, tenant: Tenant, caller: User) -> NoteStats:
    """Aggregate counts; members see their own notes, admins the whole tenant."""
    scope = [Note.tenant_id == tenant.id]
    if not caller.is_admin:
        scope.append(Note.user_id == caller.id)

    async def _count(*extra) -> int:
        stmt = select(func.count()).select_from(Note).where(*scope, *extra)
        return (await session.execute(stmt)).scalar_one()

    active = await _count(Note.is_archived.is_(False))  # type: ignore[attr-defined]
    archived = await _count(Note.is_archived.is_(True))  # type: ignore[attr-defined]
    pinned = await _count(Note.is_archived.is_(False), Note.is_pinned.is_(True))  # type: ignore[attr-defined]

    total_words = (await session.execute(
        select(func.coalesce(func.sum(Note.word_count), 0))
        .where(*scope, Note.is_archived.is_(False))  # type: ignore[attr-defined]
    )).scalar_one()

    by_user = None
    if caller.is_admin:
        stmt = (
            select(User.id, User.email, User.first_name, User.last_name, func.count(Note.id))
            .join(Note, Note.user_id == User.id)
            .where(Note.tenant_id == tenant.id, Note.is_archived.is_(False))  # type: ignore[attr-defined]
            .group_by(User.id, User.email, User.first_name, User.last_name)
            .order_by(func.count(Note.id).desc())
        )
        by_user = [
            AuthorBreakdown(
                user_id=row[0],
                email=row[1],
                name=f"{row[2]} {row[3]}".strip(),
                count=row[4],
            )
            for row in (await session.execute(stmt)).all()
        ]

    return NoteStats(
        total_notes=active,
        archived_notes=archived,
        pinned_notes=pinned,
        total_words=int(total_words),
        average_words_per_note=(int(total_words) * 2 + active) // (2 * active) if active else 0,
        notes_by_user=by_user,
    )


async def read_note(session: AsyncSession, note: Note) -> NoteRead:
    """Project a note together with its author."""
    author = await session.get(User, note.user_id)
    if author is None:
        raise NoteNotFound()
    return to_note_read(note, author)


# ── Internal helper ───────────────────────────────────────────

async def _get_or_404(session: AsyncSession, note_id: uuid.UUID, tenant_id: uuid.UUID) -> Note:
    stmt = select(Note).where(
        Note.id == note_id,
        Note.tenant_id == tenant_id,
    )
    result = await session.execute(stmt)
    note = result.scalar_one_or_none()
    if note is None:
        raise NoteNotFound()
    return note
