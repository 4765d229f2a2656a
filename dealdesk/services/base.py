"""Helpers shared by the entity services."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from ..errors import NotFoundError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_id(value: uuid.UUID | str | None, entity: str) -> uuid.UUID:
    """Coerce an id to UUID; malformed ids can never match a row."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise NotFoundError(entity, value) from None


def optional_id(value: uuid.UUID | str | None) -> uuid.UUID | None:
    if value in (None, ""):
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None
