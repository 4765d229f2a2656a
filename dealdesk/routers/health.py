"""Liveness and readiness probes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models import Base

router = APIRouter()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    await db.execute(text("SELECT 1"))
    return {"status": "healthy", "service": "dealdesk"}


@router.get("/ready")
async def readiness_check(response: Response, db: AsyncSession = Depends(get_db)):
    """Ready once every CRM table exists in the connected database."""
    conn = await db.connection()
    present = set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))
    missing = sorted(set(Base.metadata.tables) - present)
    if missing:
        response.status_code = 503
        return {"status": "not_ready", "service": "dealdesk", "missing_tables": missing}
    return {"status": "ready", "service": "dealdesk"}
