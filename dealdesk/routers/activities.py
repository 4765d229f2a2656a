"""Activity feed routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database import get_db
from ..schemas.domain import Activity, EntityType
from ..services import activity_svc

router = APIRouter(prefix="/api/activities", tags=["activities"])


@router.get("", response_model=list[Activity])
async def activity_feed(
    limit: int = Query(default=settings.activity_feed_limit, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    return await activity_svc.list_activities(db, limit=limit)


@router.get("/{entity_type}/{entity_id}", response_model=list[Activity])
async def entity_activities(
    entity_type: EntityType, entity_id: str, db: AsyncSession = Depends(get_db)
):
    return await activity_svc.list_activities_for_entity(db, entity_type, entity_id)
