"""Contact service - CRUD, optionally scoped to one company."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import events
from ..errors import NotFoundError
from ..mappers import map_contact
from ..models.company import Company as CompanyRow
from ..models.contact import Contact as ContactRow
from ..schemas.domain import Contact
from ..schemas.forms import ContactForm, ContactUpdate
from .base import optional_id, parse_id, utcnow

log = logging.getLogger(__name__)


async def list_contacts(
    db: AsyncSession, *, company_id: uuid.UUID | str | None = None
) -> list[Contact]:
    stmt = select(ContactRow)
    if company_id is not None:
        stmt = stmt.where(ContactRow.company_id == parse_id(company_id, "company"))
    stmt = stmt.order_by(ContactRow.name, ContactRow.id)
    try:
        rows = list((await db.execute(stmt)).scalars().all())
    except SQLAlchemyError:
        if company_id is not None:
            log.exception("Error fetching contacts for company %s", company_id)
        else:
            log.exception("Error fetching contacts")
        raise
    return [await map_contact(db, row) for row in rows]


async def _get_row(db: AsyncSession, contact_id: uuid.UUID | str) -> ContactRow:
    row = await db.get(ContactRow, parse_id(contact_id, "contact"))
    if row is None:
        raise NotFoundError("contact", contact_id)
    return row


async def _company_row(db: AsyncSession, company_id: uuid.UUID | str) -> CompanyRow:
    company = await db.get(CompanyRow, parse_id(company_id, "company"))
    if company is None:
        raise NotFoundError("company", company_id)
    return company


async def get_contact(db: AsyncSession, contact_id: uuid.UUID | str) -> Contact:
    try:
        row = await _get_row(db, contact_id)
    except SQLAlchemyError:
        log.exception("Error fetching contact with ID %s", contact_id)
        raise
    return await map_contact(db, row)


async def create_contact(
    db: AsyncSession,
    data: ContactForm,
    *,
    actor_id: uuid.UUID | str | None = None,
    bus: events.EventBus | None = None,
) -> Contact:
    company = await _company_row(db, data.company_id)
    row = ContactRow(
        name=data.name,
        email=data.email,
        phone=data.phone or None,
        position=data.position or None,
        avatar=data.avatar or None,
        company_id=company.id,
    )
    db.add(row)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Error creating contact")
        raise
    await db.refresh(row)
    contact = await map_contact(db, row)

    await (bus or events.bus).publish(db, events.DomainEvent(
        name=events.CONTACT_ADDED,
        entity_type="contact",
        entity_id=row.id,
        description=f'Added new contact "{row.name}" at {company.name}',
        actor_id=optional_id(actor_id),
    ))
    return contact


async def update_contact(
    db: AsyncSession, contact_id: uuid.UUID | str, data: ContactUpdate
) -> Contact:
    row = await _get_row(db, contact_id)
    changes = data.model_dump(exclude_unset=True)
    if "company_id" in changes:
        changes["company_id"] = (await _company_row(db, changes["company_id"])).id
    if "avatar" in changes:
        changes["avatar"] = changes["avatar"] or None
    for key, value in changes.items():
        setattr(row, key, value)
    row.updated_at = utcnow()
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Error updating contact with ID %s", contact_id)
        raise
    await db.refresh(row)
    return await map_contact(db, row)


async def delete_contact(db: AsyncSession, contact_id: uuid.UUID | str) -> None:
    row = await _get_row(db, contact_id)
    await db.delete(row)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Error deleting contact with ID %s", contact_id)
        raise
