"""Dashboard routes - aggregate stats and stat cards."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.domain import DashboardStats, StatCard
from ..services import dashboard_svc

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(db: AsyncSession = Depends(get_db)):
    return await dashboard_svc.get_dashboard_stats(db)


@router.get("/cards", response_model=list[StatCard])
async def dashboard_cards(db: AsyncSession = Depends(get_db)):
    return await dashboard_svc.get_stat_cards(db)
