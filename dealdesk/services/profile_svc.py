"""Profile service - users available for assignment and the signed-in user."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotAuthenticatedError, NotFoundError
from ..mappers import map_user
from ..models.profile import Profile
from ..schemas.domain import User
from ..schemas.forms import ProfileUpdate
from .base import optional_id, parse_id, utcnow

log = logging.getLogger(__name__)


async def list_profiles(db: AsyncSession) -> list[User]:
    try:
        rows = (await db.execute(select(Profile).order_by(Profile.name, Profile.id))).scalars().all()
    except SQLAlchemyError:
        log.exception("Error fetching profiles")
        raise
    return [map_user(row) for row in rows]


async def get_profile(db: AsyncSession, profile_id: uuid.UUID | str) -> User:
    row = await db.get(Profile, parse_id(profile_id, "profile"))
    if row is None:
        raise NotFoundError("profile", profile_id)
    return map_user(row)


async def get_current_profile(
    db: AsyncSession, user_id: uuid.UUID | str | None
) -> User | None:
    """Resolve the signed-in user's profile, or None when nobody is signed in."""
    pid = optional_id(user_id)
    if pid is None:
        return None
    return await get_profile(db, pid)


async def create_profile(
    db: AsyncSession,
    *,
    name: str,
    email: str,
    avatar: str | None = None,
    profile_id: uuid.UUID | None = None,
) -> User:
    """Create the profile row for an account provisioned by the identity provider."""
    row = Profile(id=profile_id or uuid.uuid4(), name=name, email=email, avatar=avatar)
    db.add(row)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Error creating profile for %s", email)
        raise
    await db.refresh(row)
    return map_user(row)


async def update_current_profile(
    db: AsyncSession, user_id: uuid.UUID | str | None, data: ProfileUpdate
) -> User:
    pid = optional_id(user_id)
    if pid is None:
        raise NotAuthenticatedError("No authenticated user found")
    row = await db.get(Profile, pid)
    if row is None:
        raise NotFoundError("profile", pid)
    changes = data.model_dump(exclude_unset=True)
    if "avatar" in changes:
        changes["avatar"] = changes["avatar"] or None
    for key, value in changes.items():
        setattr(row, key, value)
    row.updated_at = utcnow()
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Error updating profile %s", pid)
        raise
    await db.refresh(row)
    return map_user(row)
