"""Profile routes - assignable users and the signed-in user's profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..deps import get_current_user_id
from ..errors import NotAuthenticatedError
from ..schemas.domain import User
from ..schemas.forms import ProfileUpdate
from ..services import profile_svc

router = APIRouter(prefix="/api/profiles", tags=["profiles"])


@router.get("", response_model=list[User])
async def profile_list(db: AsyncSession = Depends(get_db)):
    return await profile_svc.list_profiles(db)


@router.get("/me", response_model=User)
async def my_profile(
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
):
    profile = await profile_svc.get_current_profile(db, user_id)
    if profile is None:
        raise NotAuthenticatedError("No authenticated user found")
    return profile


@router.patch("/me", response_model=User)
async def update_my_profile(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
):
    return await profile_svc.update_current_profile(db, user_id, data)


@router.get("/{profile_id}", response_model=User)
async def profile_detail(profile_id: str, db: AsyncSession = Depends(get_db)):
    return await profile_svc.get_profile(db, profile_id)
