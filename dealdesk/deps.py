"""Request-scoped dependencies."""

from __future__ import annotations

from fastapi import Request

from .config import settings


async def get_current_user_id(request: Request) -> str | None:
    """Id of the signed-in user as forwarded by the identity gateway."""
    value = request.headers.get(settings.user_header, "").strip()
    return value or None
