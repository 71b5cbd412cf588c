"""Note model — tenant-scoped, authored by a user."""

import uuid
from datetime import datetime

from pydantic import BaseModel, field_validator
from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from notes_app.models.base import TimestampMixin, load_json, new_uuid
from notes_app.models.user import User

TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 10000


class Note(TimestampMixin, SQLModel, table=True):
    __tablename__ = "notes"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)

    title: str = Field(max_length=TITLE_MAX_LENGTH, nullable=False)
    content: str = Field(sa_column=Column(Text, nullable=False))
    # Normalized tags as a JSON array of strings.
    tags_json: str = Field(default="[]", sa_column=Column(Text, nullable=False, server_default="[]"))

    is_pinned: bool = Field(default=False)
    color: str = Field(default="#DFD0B8", max_length=7)
    is_archived: bool = Field(default=False, index=True)

    # Derived from content on every content write
    word_count: int = Field(default=0)
    reading_time: int = Field(default=0)  # minutes


# ── Pydantic schemas ─────────────────────────────────────────

class NoteCreate(SQLModel):
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(min_length=1, max_length=CONTENT_MAX_LENGTH)
    tags: list[str] | None = None
    color: str | None = None
    is_pinned: bool = False

    # Length limits apply to the trimmed title
    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class NoteUpdate(SQLModel):
    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str | None = Field(default=None, min_length=1, max_length=CONTENT_MAX_LENGTH)
    tags: list[str] | None = None
    color: str | None = None
    is_pinned: bool | None = None
    is_archived: bool | None = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class NoteMetadata(BaseModel):
    word_count: int
    reading_time: int


class NoteAuthor(BaseModel):
    id: uuid.UUID
    email: str
    name: str


class NoteRead(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    user_id: uuid.UUID
    author: NoteAuthor
    title: str
    content: str
    tags: list[str]
    is_pinned: bool
    color: str
    is_archived: bool
    metadata: NoteMetadata
    created_at: datetime
    updated_at: datetime


def note_tags(note: Note) -> list[str]:
    return load_json(note.tags_json, [])  # type: ignore[return-value]


def to_note_read(note: Note, author: User) -> NoteRead:
    return NoteRead(
        id=note.id,
        tenant_id=note.tenant_id,
        user_id=note.user_id,
        author=NoteAuthor(id=author.id, email=author.email, name=author.full_name),
        title=note.title,
        content=note.content,
        tags=note_tags(note),
        is_pinned=note.is_pinned,
        color=note.color,
        is_archived=note.is_archived,
        metadata=NoteMetadata(word_count=note.word_count, reading_time=note.reading_time),
        created_at=note.created_at,
        updated_at=note.updated_at,
    )
