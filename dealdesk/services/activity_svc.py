"""Activity service - audit trail reads and the event subscriber that writes it."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..events import EventBus, DomainEvent
from ..mappers import map_activity
from ..models.activity import ACTIVITY_TYPES, Activity as ActivityRow
from ..schemas.domain import Activity
from .base import parse_id, utcnow

log = logging.getLogger(__name__)


async def list_activities(db: AsyncSession, limit: int = 20) -> list[Activity]:
    """Most recent activities first."""
    stmt = (
        select(ActivityRow)
        .order_by(ActivityRow.timestamp.desc(), ActivityRow.id)
        .limit(limit)
    )
    try:
        rows = list((await db.execute(stmt)).scalars().all())
    except SQLAlchemyError:
        log.exception("Error fetching activities")
        raise
    return [await map_activity(db, row) for row in rows]


async def list_activities_for_entity(
    db: AsyncSession, entity_type: str, entity_id: uuid.UUID | str
) -> list[Activity]:
    stmt = (
        select(ActivityRow)
        .where(
            ActivityRow.entity_type == entity_type,
            ActivityRow.entity_id == parse_id(entity_id, entity_type),
        )
        .order_by(ActivityRow.timestamp.desc(), ActivityRow.id)
    )
    try:
        rows = list((await db.execute(stmt)).scalars().all())
    except SQLAlchemyError:
        log.exception("Error fetching activities for %s %s", entity_type, entity_id)
        raise
    return [await map_activity(db, row) for row in rows]


async def create_activity(
    db: AsyncSession,
    type: str,
    description: str,
    *,
    entity_type: str | None = None,
    entity_id: uuid.UUID | None = None,
    user_id: uuid.UUID | None = None,
    timestamp: datetime | None = None,
) -> Activity:
    if type not in ACTIVITY_TYPES:
        raise ValueError(f"Unknown activity type: {type}")
    row = ActivityRow(
        type=type,
        description=description,
        entity_type=entity_type,
        entity_id=entity_id,
        user_id=user_id,
        timestamp=timestamp or utcnow(),
    )
    db.add(row)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Error creating activity")
        raise
    await db.refresh(row)
    return await map_activity(db, row)


async def record_activity(db: AsyncSession, event: DomainEvent) -> None:
    """Event subscriber: persist one Activity per domain event."""
    await create_activity(
        db,
        event.name,
        event.description,
        entity_type=event.entity_type,
        entity_id=event.entity_id,
        user_id=event.actor_id,
    )


def register(bus: EventBus) -> None:
    for name in ACTIVITY_TYPES:
        bus.subscribe(name, record_activity)
