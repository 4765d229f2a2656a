"""Company service - CRUD with contacts resolved per company."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import events
from ..errors import NotFoundError
from ..mappers import map_company
from ..models.company import Company as CompanyRow
from ..schemas.domain import Company
from ..schemas.forms import CompanyForm, CompanyUpdate
from .base import optional_id, parse_id, utcnow

log = logging.getLogger(__name__)


async def list_companies(db: AsyncSession) -> list[Company]:
    stmt = select(CompanyRow).order_by(CompanyRow.name, CompanyRow.id)
    try:
        rows = list((await db.execute(stmt)).scalars().all())
    except SQLAlchemyError:
        log.exception("Error fetching companies")
        raise
    return [await map_company(db, row) for row in rows]


async def count_companies(db: AsyncSession) -> int:
    return (await db.execute(select(func.count()).select_from(CompanyRow))).scalar() or 0


async def _get_row(db: AsyncSession, company_id: uuid.UUID | str) -> CompanyRow:
    row = await db.get(CompanyRow, parse_id(company_id, "company"))
    if row is None:
        raise NotFoundError("company", company_id)
    return row


async def get_company(db: AsyncSession, company_id: uuid.UUID | str) -> Company:
    try:
        row = await _get_row(db, company_id)
    except SQLAlchemyError:
        log.exception("Error fetching company with ID %s", company_id)
        raise
    return await map_company(db, row)


async def create_company(
    db: AsyncSession,
    data: CompanyForm,
    *,
    actor_id: uuid.UUID | str | None = None,
    bus: events.EventBus | None = None,
) -> Company:
    row = CompanyRow(
        name=data.name,
        industry=data.industry or None,
        website=data.website or None,
        logo=data.logo or None,
        size=data.size or None,
        created_by=optional_id(actor_id),
    )
    db.add(row)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Error creating company")
        raise
    await db.refresh(row)
    company = await map_company(db, row)

    await (bus or events.bus).publish(db, events.DomainEvent(
        name=events.COMPANY_ADDED,
        entity_type="company",
        entity_id=row.id,
        description=f'Added new company "{row.name}"',
        actor_id=optional_id(actor_id),
    ))
    return company


async def update_company(
    db: AsyncSession, company_id: uuid.UUID | str, data: CompanyUpdate
) -> Company:
    row = await _get_row(db, company_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(row, key, value)
    row.updated_at = utcnow()
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Error updating company with ID %s", company_id)
        raise
    await db.refresh(row)
    return await map_company(db, row)


async def delete_company(db: AsyncSession, company_id: uuid.UUID | str) -> None:
    row = await _get_row(db, company_id)
    await db.delete(row)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Error deleting company with ID %s", company_id)
        raise
