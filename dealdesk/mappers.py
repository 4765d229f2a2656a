"""Row -> domain mapping with foreign-key resolution.

Foreign keys are resolved through secondary lookups on the same session.
A null key, a dangling key or a failed lookup all resolve to one of the
sentinels below, so callers never see ``None`` for ``company``,
``assigned_to`` or ``user``.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Activity as ActivityRow
from .models import Company as CompanyRow
from .models import Contact as ContactRow
from .models import Deal as DealRow
from .models import Profile as ProfileRow
from .schemas.domain import Activity, Company, Contact, Deal, User

log = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

UNKNOWN_COMPANY = Company(
    id="unknown",
    name="Unknown Company",
    industry="Unknown",
    created_at=_EPOCH,
    updated_at=_EPOCH,
)
UNASSIGNED_USER = User(id="unknown", name="Unassigned", email="unassigned@example.com")
SYSTEM_USER = User(id="system", name="System", email="system@example.com")

RowT = TypeVar("RowT")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _ts(value: datetime | None) -> datetime:
    return value if value is not None else _now()


def _str_id(value: uuid.UUID | None) -> str | None:
    return str(value) if value is not None else None


async def _lookup(
    db: AsyncSession, model: type[RowT], row_id: uuid.UUID | None
) -> RowT | None:
    if row_id is None:
        return None
    try:
        return await db.get(model, row_id)
    except SQLAlchemyError:
        log.exception("Error fetching %s with ID %s", model.__tablename__, row_id)
        return None


def map_user(row: ProfileRow) -> User:
    return User(id=str(row.id), name=row.name, email=row.email, avatar=row.avatar or None)


def _company_shell(row: CompanyRow) -> Company:
    return Company(
        id=str(row.id),
        name=row.name,
        industry=row.industry or "Unknown",
        logo=row.logo or None,
        website=row.website or None,
        size=row.size or None,
        created_at=_ts(row.created_at),
        updated_at=_ts(row.updated_at),
    )


def _contact_with(row: ContactRow, company: Company) -> Contact:
    return Contact(
        id=str(row.id),
        name=row.name,
        email=row.email,
        phone=row.phone or None,
        position=row.position or None,
        avatar=row.avatar or None,
        created_at=_ts(row.created_at),
        updated_at=_ts(row.updated_at),
        company=company,
    )


async def map_company(
    db: AsyncSession, row: CompanyRow, *, with_contacts: bool = True
) -> Company:
    """Map a company row, loading its contacts with a separate query."""
    shell = _company_shell(row)
    if not with_contacts:
        return shell

    try:
        stmt = (
            select(ContactRow)
            .where(ContactRow.company_id == row.id)
            .order_by(ContactRow.name, ContactRow.id)
        )
        contact_rows = list((await db.execute(stmt)).scalars().all())
    except SQLAlchemyError:
        log.exception("Error fetching contacts for company %s", row.id)
        contact_rows = []

    contacts = tuple(_contact_with(c, shell) for c in contact_rows)
    return shell.model_copy(update={"contacts": contacts})


async def map_contact(db: AsyncSession, row: ContactRow) -> Contact:
    company_row = await _lookup(db, CompanyRow, row.company_id)
    company = _company_shell(company_row) if company_row else UNKNOWN_COMPANY
    return _contact_with(row, company)


async def map_deal(db: AsyncSession, row: DealRow) -> Deal:
    company_row = await _lookup(db, CompanyRow, row.company_id)
    profile_row = await _lookup(db, ProfileRow, row.assigned_to)
    return Deal(
        id=str(row.id),
        title=row.title,
        value=max(float(row.value or 0), 0.0),
        stage=row.stage,
        company=_company_shell(company_row) if company_row else UNKNOWN_COMPANY,
        assigned_to=map_user(profile_row) if profile_row else UNASSIGNED_USER,
        description=row.description or None,
        created_at=_ts(row.created_at),
        updated_at=_ts(row.updated_at),
    )


async def map_activity(db: AsyncSession, row: ActivityRow) -> Activity:
    profile_row = await _lookup(db, ProfileRow, row.user_id)
    return Activity(
        id=str(row.id),
        type=row.type,
        user=map_user(profile_row) if profile_row else SYSTEM_USER,
        description=row.description,
        timestamp=_ts(row.timestamp),
        entity_id=_str_id(row.entity_id),
        entity_type=row.entity_type,
    )
