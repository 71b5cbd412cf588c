"""Shared base fields for all models."""

import json
import math
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Column type for every stored timestamp; values are always UTC-aware.
Timestamp = DateTime(timezone=True)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


def dump_json(value: object) -> str:
    """Serialize a value for a JSON text column."""
    return json.dumps(value)


def load_json(raw: str | None, default: object) -> object:
    if not raw:
        return default
    return json.loads(raw)


class TimestampMixin(SQLModel):
    """Created / updated timestamps injected into every table."""

    created_at: datetime = Field(default_factory=utcnow, sa_type=Timestamp, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=Timestamp, nullable=False)


class Pagination(SQLModel):
    page: int
    limit: int
    total: int
    pages: int


def paginate(page: int, limit: int, total: int) -> Pagination:
    return Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit))
