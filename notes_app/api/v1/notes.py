"""Notes CRUD — tenant-scoped, ownership enforced."""

import uuid

from fastapi import APIRouter, Query, status
from pydantic import BaseModel

from notes_app.api.deps import MemberAuth, Session
from notes_app.models.base import Pagination, paginate
from notes_app.models.note import NoteCreate, NoteRead, NoteUpdate, to_note_read
from notes_app.services import notes as note_service
from notes_app.services import quota

router = APIRouter(prefix="/notes", tags=["notes"])


# ── Schemas ──────────────────────────────────────────────────

class NoteListResponse(BaseModel):
    notes: list[NoteRead]
    pagination: Pagination
    subscription: quota.QuotaSnapshot


class NoteStatsResponse(BaseModel):
    stats: note_service.NoteStats
    subscription: quota.QuotaSnapshot


# ── Routes ───────────────────────────────────────────────────

@router.post("", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(
    body: NoteCreate,
    auth: MemberAuth,
    session: Session,
) -> NoteRead:
    note = await note_service.create_note(session, auth.tenant, auth.user, body)
    return await note_service.read_note(session, note)


@router.get("", response_model=NoteListResponse)
async def list_notes(
    auth: MemberAuth,
    session: Session,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort: str = note_service.DEFAULT_SORT,
    archived: bool = False,
    pinned: bool | None = None,
    user_id: uuid.UUID | None = Query(None, description="Author filter (admins only)"),
    tags: str | None = Query(None, description="Comma-separated; matches any"),
) -> NoteListResponse:
    filters = note_service.NoteFilters(
        page=page,
        limit=limit,
        sort=sort,
        archived=archived,
        pinned=pinned,
        user_id=user_id,
        tags=tags.split(",") if tags else [],
    )
    result = await note_service.list_notes(session, auth.tenant, auth.user, filters)
    return NoteListResponse(
        notes=[to_note_read(note, author) for note, author in result.notes],
        pagination=paginate(page, limit, result.total),
        subscription=result.quota,
    )


@router.get("/stats", response_model=NoteStatsResponse)
async def get_note_stats(auth: MemberAuth, session: Session) -> NoteStatsResponse:
    """Aggregate note counts; per-author breakdown for admins only."""
    stats = await note_service.note_stats(session, auth.tenant, auth.user)
    return NoteStatsResponse(
        stats=stats,
        subscription=await quota.snapshot(session, auth.tenant),
    )


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(
    note_id: uuid.UUID,
    auth: MemberAuth,
    session: Session,
) -> NoteRead:
    note = await note_service.get_note(session, auth.tenant, auth.user, note_id)
    return await note_service.read_note(session, note)


@router.put("/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: uuid.UUID,
    body: NoteUpdate,
    auth: MemberAuth,
    session: Session,
) -> NoteRead:
    note = await note_service.update_note(session, auth.tenant, auth.user, note_id, body)
    return await note_service.read_note(session, note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: uuid.UUID,
    auth: MemberAuth,
    session: Session,
) -> None:
    await note_service.delete_note(session, auth.tenant, auth.user, note_id)
