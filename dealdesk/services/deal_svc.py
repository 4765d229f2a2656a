"""Deal service - CRUD and stage moves for the pipeline board."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import events
from ..errors import NotFoundError
from ..mappers import map_deal
from ..models.company import Company as CompanyRow
from ..models.deal import DEAL_STAGES, Deal as DealRow
from ..schemas.domain import Deal
from ..schemas.forms import DealForm, DealUpdate
from .base import optional_id, parse_id, utcnow

log = logging.getLogger(__name__)


async def list_deals(
    db: AsyncSession,
    *,
    stage: str | None = None,
    company_id: uuid.UUID | str | None = None,
) -> list[Deal]:
    """Deals newest first, optionally filtered by stage and/or company."""
    stmt = select(DealRow)
    if stage is not None:
        if stage not in DEAL_STAGES:
            raise ValueError(f"Unknown stage: {stage}")
        stmt = stmt.where(DealRow.stage == stage)
    if company_id is not None:
        stmt = stmt.where(DealRow.company_id == parse_id(company_id, "company"))
    stmt = stmt.order_by(DealRow.created_at.desc(), DealRow.title, DealRow.id)
    try:
        rows = list((await db.execute(stmt)).scalars().all())
    except SQLAlchemyError:
        log.exception("Error fetching deals (stage=%s, company=%s)", stage, company_id)
        raise
    return [await map_deal(db, row) for row in rows]


async def list_deal_values(db: AsyncSession) -> list[tuple[float, str]]:
    """(value, stage) for every deal; the dashboard aggregates over this."""
    try:
        result = await db.execute(select(DealRow.value, DealRow.stage))
    except SQLAlchemyError:
        log.exception("Error fetching deals for dashboard stats")
        raise
    return [(float(value or 0), stage) for value, stage in result.all()]


async def _get_row(db: AsyncSession, deal_id: uuid.UUID | str) -> DealRow:
    row = await db.get(DealRow, parse_id(deal_id, "deal"))
    if row is None:
        raise NotFoundError("deal", deal_id)
    return row


async def _company_row(db: AsyncSession, company_id: uuid.UUID | str) -> CompanyRow:
    company = await db.get(CompanyRow, parse_id(company_id, "company"))
    if company is None:
        raise NotFoundError("company", company_id)
    return company


async def get_deal(db: AsyncSession, deal_id: uuid.UUID | str) -> Deal:
    try:
        row = await _get_row(db, deal_id)
    except SQLAlchemyError:
        log.exception("Error fetching deal with ID %s", deal_id)
        raise
    return await map_deal(db, row)


async def create_deal(
    db: AsyncSession,
    data: DealForm,
    *,
    actor_id: uuid.UUID | str | None = None,
    bus: events.EventBus | None = None,
) -> Deal:
    company = await _company_row(db, data.company_id)
    row = DealRow(
        title=data.title,
        value=max(float(data.value), 0.0),
        stage=data.stage,
        description=data.description or None,
        company_id=company.id,
        assigned_to=optional_id(data.assigned_to),
    )
    db.add(row)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Error creating deal")
        raise
    await db.refresh(row)
    deal = await map_deal(db, row)

    await (bus or events.bus).publish(db, events.DomainEvent(
        name=events.DEAL_CREATED,
        entity_type="deal",
        entity_id=row.id,
        description=f'Created a new deal "{row.title}" with {company.name}',
        actor_id=optional_id(actor_id),
    ))
    return deal


async def update_deal(
    db: AsyncSession,
    deal_id: uuid.UUID | str,
    data: DealUpdate,
    *,
    actor_id: uuid.UUID | str | None = None,
    bus: events.EventBus | None = None,
) -> Deal:
    """Apply a partial update.

    A stage that differs from the stored one is logged as a stage change;
    anything else, including re-sending the current stage, is a generic update.
    """
    row = await _get_row(db, deal_id)
    changes = data.model_dump(exclude_unset=True)
    stage_changed = "stage" in changes and changes["stage"] != row.stage

    if "company_id" in changes:
        changes["company_id"] = (await _company_row(db, changes["company_id"])).id
    if "assigned_to" in changes:
        changes["assigned_to"] = optional_id(changes["assigned_to"])
    if "value" in changes:
        changes["value"] = max(float(changes["value"]), 0.0)
    for key, value in changes.items():
        setattr(row, key, value)
    row.updated_at = utcnow()
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Error updating deal with ID %s", deal_id)
        raise
    await db.refresh(row)
    deal = await map_deal(db, row)

    if stage_changed:
        event = events.DomainEvent(
            name=events.DEAL_STAGE_CHANGED,
            entity_type="deal",
            entity_id=row.id,
            description=f'Moved "{row.title}" deal to {row.stage} stage',
            actor_id=optional_id(actor_id),
        )
    else:
        event = events.DomainEvent(
            name=events.DEAL_UPDATED,
            entity_type="deal",
            entity_id=row.id,
            description=f'Updated deal "{row.title}"',
            actor_id=optional_id(actor_id),
        )
    await (bus or events.bus).publish(db, event)
    return deal


async def move_deal(
    db: AsyncSession,
    deal_id: uuid.UUID | str,
    stage: str,
    *,
    actor_id: uuid.UUID | str | None = None,
    bus: events.EventBus | None = None,
) -> Deal:
    """Move a deal to another stage column; same-stage moves write nothing."""
    if stage not in DEAL_STAGES:
        raise ValueError(f"Unknown stage: {stage}")
    row = await _get_row(db, deal_id)
    if row.stage == stage:
        return await map_deal(db, row)
    return await update_deal(
        db, deal_id, DealUpdate(stage=stage), actor_id=actor_id, bus=bus
    )


async def delete_deal(db: AsyncSession, deal_id: uuid.UUID | str) -> None:
    row = await _get_row(db, deal_id)
    await db.delete(row)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Error deleting deal with ID %s", deal_id)
        raise
